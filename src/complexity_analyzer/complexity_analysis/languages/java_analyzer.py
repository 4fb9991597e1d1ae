"""Java-specific structural scanner.

Recognises classes, interfaces, enums, records and annotation types, and
methods and constructors declared in them. Interface and abstract methods
are reported as bodiless methods.
"""

import re

from ..base_analyzer import BraceLanguageScanner, DeclarationPattern, NormalizationRules

_ANNOTATIONS = r"(?:@[\w.]+(?:\([^)]*\))?\s+)*"
_TYPE = r"[\w$.\[\]?]+(?:<[^()]*?>)?(?:\[\])*"

_CLASS = re.compile(
    r"^\s*" + _ANNOTATIONS
    + r"(?:(?:public|protected|private|static|final|abstract|sealed|non-sealed|strictfp)\s+)*"
    r"(?:class|interface|enum|record|@interface)\s+(?P<name>[A-Za-z_$][\w$]*)"
)

_METHOD = re.compile(
    r"^\s*" + _ANNOTATIONS
    + r"(?:(?:public|protected|private|static|final|abstract|synchronized|native|strictfp|default)\s+)*"
    r"(?:<[^>]*>\s+)?"
    r"(?:(?P<rtype>" + _TYPE + r")\s+)?"
    r"(?P<name>[A-Za-z_$][\w$]*)\s*\("
)

_FIELD = re.compile(
    r"^\s*" + _ANNOTATIONS
    + r"(?:(?:public|protected|private|static|final|transient|volatile)\s+)*"
    r"(?P<rtype>" + _TYPE + r")\s+(?P<name>[A-Za-z_$][\w$]*)\s*(?:=|;|,|\[)"
)


class JavaScanner(BraceLanguageScanner):
    """Structural scanner for Java source files."""

    language = "java"
    extensions = (".java",)
    aliases = ()

    rules = NormalizationRules(
        line_comments=("//",),
        block_comments=(("/*", "*/"),),
        string_quotes=('"', "'"),
        multiline_quotes=('"""',),
    )
    class_patterns = (DeclarationPattern(_CLASS),)
    # Top-level methods only occur in snippets, but they read the same
    function_patterns = (DeclarationPattern(_METHOD),)
    member_patterns = (DeclarationPattern(_METHOD),)
    field_patterns = (_FIELD,)
