"""C#-specific structural scanner.

Recognises classes, interfaces, structs, enums and records, their methods,
constructors and finalizers, and fields and properties as class members.
Expression-bodied members (``=> expr;``) are reported as bodiless methods.
"""

import re

from ..base_analyzer import BraceLanguageScanner, DeclarationPattern, NormalizationRules

_ATTRIBUTES = r"(?:\[[^\]]*\]\s*)*"
_TYPE = r"[\w.]+(?:<[^()]*?>)?(?:\[[,\s]*\])*\??"

_CLASS = re.compile(
    r"^\s*" + _ATTRIBUTES
    + r"(?:(?:public|private|protected|internal|static|abstract|sealed|partial|readonly|unsafe|new|file|ref)\s+)*"
    r"(?:class|interface|struct|enum|record(?:\s+(?:class|struct))?)\s+(?P<name>[A-Za-z_]\w*)"
)

_METHOD = re.compile(
    r"^\s*" + _ATTRIBUTES
    + r"(?:(?:public|private|protected|internal|static|virtual|override|abstract|sealed|async|extern|unsafe|new|partial|readonly)\s+)*"
    r"(?:(?P<rtype>" + _TYPE + r")\s+)?"
    r"(?P<name>~?[A-Za-z_]\w*)\s*(?:<[^()]*?>)?\s*\("
)

_FIELD = re.compile(
    r"^\s*" + _ATTRIBUTES
    + r"(?:(?:public|private|protected|internal|static|readonly|const|volatile|new|required|virtual|override|abstract|event)\s+)*"
    r"(?P<rtype>" + _TYPE + r")\s+(?P<name>[A-Za-z_]\w*)\s*(?:=|;|\{)"
)


class CSharpScanner(BraceLanguageScanner):
    """Structural scanner for C# source files."""

    language = "csharp"
    extensions = (".cs",)
    aliases = ("c#", "cs")

    rules = NormalizationRules(
        line_comments=("//",),
        block_comments=(("/*", "*/"),),
        string_quotes=('"', "'"),
        multiline_quotes=('"""',),
    )
    class_patterns = (DeclarationPattern(_CLASS),)
    # Top-level statements may declare local functions
    function_patterns = (DeclarationPattern(_METHOD),)
    member_patterns = (DeclarationPattern(_METHOD),)
    field_patterns = (_FIELD,)
