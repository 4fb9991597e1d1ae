"""JavaScript and TypeScript structural scanner.

Handles function declarations and expressions, arrow functions bound to a
variable, classes with their methods, accessors and arrow-function fields.
TypeScript annotations are tolerated but not interpreted.
"""

import re

from ..base_analyzer import BraceLanguageScanner, DeclarationPattern, NormalizationRules

_IDENT = r"[A-Za-z_$][\w$]*"

# "(" only counts as an arrow function when "=>" follows its parameter list
_ARROW_START = (
    r"(?:async\s+)?(?:(?P<arrow_param>" + _IDENT + r")\s*=>"
    r"|(?:<[^>]*>\s*)?\((?=[^()]*(?:\([^()]*\)[^()]*)*\)\s*(?::[^=]+?)?=>))"
)

_CLASS_DECLARATION = re.compile(
    r"^\s*(?:export\s+(?:default\s+)?)?(?:(?:abstract|declare)\s+)*"
    r"class\b(?:\s+(?!extends\b|implements\b)(?P<name>" + _IDENT + r"))?"
)
_CLASS_EXPRESSION = re.compile(
    r"^\s*(?:export\s+)?(?:const|let|var)\s+(?P<name>" + _IDENT + r")\s*=\s*class\b"
)

_FUNCTION_DECLARATION = re.compile(
    r"^\s*(?:export\s+(?:default\s+)?)?(?:declare\s+)?(?:async\s+)?"
    r"function\b\s*\*?\s*(?P<name>" + _IDENT + r")?\s*(?:<[^>]*>)?\s*\("
)
_FUNCTION_EXPRESSION = re.compile(
    r"^\s*(?:export\s+)?(?:const|let|var)\s+(?P<name>" + _IDENT + r")\s*(?::[^=]+)?=\s*"
    r"(?:async\s+)?function\b\s*\*?\s*(?:" + _IDENT + r")?\s*\("
)
_ASSIGNED_FUNCTION = re.compile(
    r"^\s*(?:[\w$]+\.)+(?P<name>" + _IDENT + r")\s*=\s*"
    r"(?:async\s+)?function\b\s*\*?\s*(?:" + _IDENT + r")?\s*\("
)
_ARROW_FUNCTION = re.compile(
    r"^\s*(?:export\s+)?(?:const|let|var)\s+(?P<name>" + _IDENT + r")\s*(?::[^=]+)?=\s*"
    + _ARROW_START
)

_METHOD = re.compile(
    r"^\s*(?:(?:public|private|protected|static|async|readonly|override|abstract|declare|get|set)\s+)*"
    r"\*?\s*(?P<name>#?" + _IDENT + r")\s*[?!]?\s*(?:<[^>]*>)?\s*\("
)
_ARROW_MEMBER = re.compile(
    r"^\s*(?:(?:public|private|protected|static|readonly|override)\s+)*"
    r"(?P<name>#?" + _IDENT + r")\s*(?::[^=]+)?=\s*" + _ARROW_START
)

_FIELD = re.compile(
    r"^\s*(?:(?:public|private|protected|static|readonly|declare|override|accessor)\s+)*"
    r"(?P<name>#?" + _IDENT + r")\s*[?!]?\s*(?::[^=;]+)?(?:=(?!>)|;)"
)


class JavaScriptScanner(BraceLanguageScanner):
    """Structural scanner for JavaScript, JSX and TypeScript files."""

    language = "javascript"
    extensions = (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx")
    aliases = ("js", "ts", "typescript", "node", "react")

    rules = NormalizationRules(
        line_comments=("//",),
        block_comments=(("/*", "*/"),),
        string_quotes=('"', "'"),
        multiline_quotes=("`",),
    )
    class_patterns = (
        DeclarationPattern(_CLASS_DECLARATION),
        DeclarationPattern(_CLASS_EXPRESSION),
    )
    function_patterns = (
        DeclarationPattern(_FUNCTION_DECLARATION),
        DeclarationPattern(_FUNCTION_EXPRESSION),
        DeclarationPattern(_ASSIGNED_FUNCTION),
        DeclarationPattern(_ARROW_FUNCTION, body_required=False),
    )
    member_patterns = (
        DeclarationPattern(_ARROW_MEMBER, body_required=False),
        DeclarationPattern(_METHOD),
    )
    field_patterns = (_FIELD,)
