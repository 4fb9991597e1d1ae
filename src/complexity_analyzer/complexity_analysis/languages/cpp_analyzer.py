"""C++ structural scanner.

Recognises classes, structs and unions (templated or not), free functions,
out-of-line member definitions such as ``Foo::bar()``, constructors,
destructors and operator overloads. Prototypes inside a class body are
reported as bodiless methods; prototypes at namespace scope are ignored.
"""

import re

from ..base_analyzer import BraceLanguageScanner, DeclarationPattern, NormalizationRules

_TEMPLATE = r"(?:template\s*<[^>]*>\s*)?"
_QUALIFIERS = r"(?:(?:const|volatile|unsigned|signed|long|short|struct|enum|typename)\s+)*"

_CLASS = re.compile(
    r"^\s*" + _TEMPLATE + r"(?:enum\s+)?(?:class|struct|union)\s+"
    r"(?:(?:alignas\s*\([^)]*\)|\[\[[^\]]*\]\]|[A-Z_][A-Z0-9_]*)\s+)*"
    r"(?P<name>[A-Za-z_]\w*)\s*(?:final\b\s*)?(?::(?!:)[^;{]*)?(?:\{|$)"
)

_FUNCTION = re.compile(
    r"^\s*" + _TEMPLATE
    + r"(?:(?:inline|static|virtual|explicit|constexpr|consteval|extern|friend)\s+)*"
    r"(?P<rtype>" + _QUALIFIERS + r"[\w:]+(?:<[^()]*?>)?(?:\s*[*&]+\s*|\s+)(?:const\s*[*&]*\s*)?)?"
    r"(?P<name>~?[A-Za-z_]\w*(?:::~?[A-Za-z_]\w*)*(?:::operator\s*(?:\(\)|[^\s(]+))?"
    r"|operator\s*(?:\(\)|[^\s(]+))\s*\("
)

_FIELD = re.compile(
    r"^\s*(?:(?:static|const|constexpr|mutable|volatile|inline|unsigned|signed|long|short)\s+)*"
    r"(?P<rtype>[\w:]+(?:<[^()]*?>)?)(?:\s*[*&]+\s*|\s+)"
    r"(?P<name>[A-Za-z_]\w*)\s*(?:\[[^\]]*\]\s*)?(?:=|;|\{|,)"
)


class CppScanner(BraceLanguageScanner):
    """Structural scanner for C++ sources and headers."""

    language = "cpp"
    extensions = (".cpp", ".cc", ".cxx", ".c++", ".hpp", ".hh", ".hxx", ".h++")
    aliases = ("c++", "cxx", "cplusplus")

    rules = NormalizationRules(
        line_comments=("//",),
        block_comments=(("/*", "*/"),),
        string_quotes=('"', "'"),
    )
    class_patterns = (DeclarationPattern(_CLASS),)
    function_patterns = (DeclarationPattern(_FUNCTION),)
    member_patterns = (DeclarationPattern(_FUNCTION),)
    field_patterns = (_FIELD,)

    def count_parameters(self, parameter_text: str) -> int:
        # f(void) declares no parameters
        if parameter_text.strip() == "void":
            return 0
        return super().count_parameters(parameter_text)
