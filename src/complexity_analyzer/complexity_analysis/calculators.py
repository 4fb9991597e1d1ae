"""Complexity calculators working on normalized source text.

Every calculator sees text whose comments and literal contents have already
been blanked by a scanner, so keywords inside strings never count. Cyclomatic
and cognitive scoring share one pass over the text that records each decision
construct together with the nesting active at that point.
"""

import math
import re
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from ..config import CyclomaticConfig
from .models import ConstructKind, ControlConstruct

# Alternation order matters: "else if" must win over "else" and "if".
_TOKEN_PATTERN = re.compile(
    r"(?P<else_if>(?<![#.$\w])else\s+if\b)"
    r"|(?P<keyword>(?<![#.$\w])(?:else|if|foreach|for|while|do|switch|case|catch)\b)"
    r"|(?P<jump>(?<![.$\w])(?:break|continue)\s+[A-Za-z_$][\w$]*\s*;)"
    r"|(?P<logical>&&|\|\|)"
    r"|(?P<ternary>(?<![?<])\?(?![?.:>]))"
    r"|(?P<punct>[{}();])"
)

_TERNARY_MARK = re.compile(r"(?<![?<])\?(?![?.:>])")

_KEYWORD_KINDS = {
    "if": ConstructKind.IF,
    "else": ConstructKind.ELSE,
    "for": ConstructKind.FOR,
    "foreach": ConstructKind.FOR,
    "while": ConstructKind.WHILE,
    "do": ConstructKind.DO,
    "switch": ConstructKind.SWITCH,
    "case": ConstructKind.CASE,
    "catch": ConstructKind.CATCH,
}

# Constructs whose body brace opens a cognitive nesting level
NESTING_KINDS = frozenset({
    ConstructKind.IF,
    ConstructKind.ELSE_IF,
    ConstructKind.ELSE,
    ConstructKind.FOR,
    ConstructKind.WHILE,
    ConstructKind.DO,
    ConstructKind.SWITCH,
    ConstructKind.CATCH,
})


def _is_ternary_candidate(text: str, index: int) -> bool:
    before = text[index - 1] if index > 0 else ""
    after = text[index + 1] if index + 1 < len(text) else ""
    return before not in ("?", "<") and after not in ("?", ".", ":", ">")


def _answers_ternary(text: str, start: int) -> bool:
    """Whether the ``?`` at ``start`` is answered by a ``:`` in the same expression.

    Scans forward at the ``?``'s own bracket depth. A ``;``, ``,`` or a
    closing bracket ends the expression, and so does a ``{`` that does not
    open an object literal or arrow body. Nested ternaries are matched
    pairwise, which keeps nullable types (``int? x``) and optional
    parameters (``b?)``) from counting.
    """
    pending = 1
    depth = 0
    last = "?"
    last_two = "?"
    index = start + 1
    length = len(text)
    while index < length:
        char = text[index]
        if char in "([":
            depth += 1
        elif char == "{":
            if depth == 0 and last not in ("?", ":") and last_two != "=>":
                return False
            depth += 1
        elif char in ")]}":
            if depth == 0:
                return False
            depth -= 1
        elif depth == 0:
            if char in ";,":
                return False
            if char == "?" and _is_ternary_candidate(text, index):
                pending += 1
            elif char == ":":
                if text.startswith("::", index):
                    index += 2
                    last, last_two = ":", "::"
                    continue
                pending -= 1
                if pending == 0:
                    return True
        if not char.isspace():
            last_two = last + char
            last = char
        index += 1
    return False


def find_ternaries(text: str) -> Set[int]:
    """Offsets of every ``?`` in the text that is a conditional operator."""
    return {
        match.start()
        for match in _TERNARY_MARK.finditer(text)
        if _answers_ternary(text, match.start())
    }


def find_control_constructs(text: str) -> List[ControlConstruct]:
    """Find every decision construct in normalized text, in source order.

    Nesting is tracked with a brace stack. A ``{`` that opens the body of a
    nesting construct pushes a nesting level, any other ``{`` pushes a
    neutral entry, and ``}`` pops one entry. A construct waits for its body
    brace until a ``;`` at parenthesis depth 0 or a following line that does
    not start with ``{`` shows the body is brace-less.

    Args:
        text: Normalized source text

    Returns:
        List of ControlConstruct in the order they appear
    """
    constructs: List[ControlConstruct] = []
    stack: List[Optional[ConstructKind]] = []
    nesting = 0
    paren_depth = 0
    pending: Optional[ConstructKind] = None
    after_do = False
    ternaries = find_ternaries(text)
    offset = 0

    for line_number, raw_line in enumerate(text.splitlines(keepends=True), start=1):
        line = raw_line.splitlines()[0]
        line_offset = offset
        offset += len(raw_line)
        if pending is not None and paren_depth == 0 and not line.lstrip().startswith("{"):
            after_do = pending is ConstructKind.DO
            pending = None

        for match in _TOKEN_PATTERN.finditer(line):
            group = match.lastgroup
            token = match.group()

            if group == "else_if" or group == "keyword":
                kind = ConstructKind.ELSE_IF if group == "else_if" else _KEYWORD_KINDS[token]
                if kind is ConstructKind.WHILE and after_do:
                    constructs.append(
                        ControlConstruct(kind, line_number, nesting, do_while_tail=True)
                    )
                    after_do = False
                    continue
                after_do = False
                constructs.append(ControlConstruct(kind, line_number, nesting))
                if kind in NESTING_KINDS:
                    pending = kind
            elif group == "jump":
                constructs.append(
                    ControlConstruct(ConstructKind.LABELED_JUMP, line_number, nesting)
                )
                if paren_depth == 0 and pending is not None:
                    after_do = pending is ConstructKind.DO
                    pending = None
            elif group == "logical":
                kind = ConstructKind.LOGICAL_AND if token == "&&" else ConstructKind.LOGICAL_OR
                constructs.append(ControlConstruct(kind, line_number, nesting))
            elif group == "ternary":
                if line_offset + match.start() not in ternaries:
                    continue
                constructs.append(ControlConstruct(ConstructKind.TERNARY, line_number, nesting))
            elif token == "(":
                paren_depth += 1
            elif token == ")":
                paren_depth = max(0, paren_depth - 1)
            elif token == ";":
                if paren_depth == 0 and pending is not None:
                    after_do = pending is ConstructKind.DO
                    pending = None
            elif token == "{":
                after_do = False
                if pending is not None and paren_depth == 0:
                    stack.append(pending)
                    nesting += 1
                    pending = None
                else:
                    stack.append(None)
            elif token == "}":
                after_do = False
                if stack:
                    closed = stack.pop()
                    if closed is not None:
                        nesting -= 1
                        after_do = closed is ConstructKind.DO

    return constructs


def calculate_nesting_depth(text: str, base: int = 0) -> int:
    """Maximum brace depth reached in the text, minus ``base``.

    Stray closing braces are ignored so the depth never goes negative.

    Args:
        text: Normalized source text
        base: Depth to discount, 1 when the span includes its own body brace

    Returns:
        Maximum nesting depth, never below 0
    """
    depth = 0
    max_depth = 0
    for char in text:
        if char == "{":
            depth += 1
            if depth > max_depth:
                max_depth = depth
        elif char == "}" and depth > 0:
            depth -= 1
    return max(0, max_depth - base)


def calculate_maintainability_index(cyclomatic: int, lines: int) -> int:
    """Calculate the maintainability index on a 0-100 scale.

    MI = (171 - 5.2 * ln(2L) - 0.23 * C - 16.2 * ln(L)) * 100 / 171

    The Halstead volume of the classic formula is approximated by 2L.

    Args:
        cyclomatic: Cyclomatic complexity (C)
        lines: Lines of code (L)

    Returns:
        Maintainability index, 100 for empty code
    """
    if lines == 0 or cyclomatic == 0:
        return 100

    lines = max(1, lines)
    cyclomatic = max(1, cyclomatic)

    mi = 171 - 5.2 * math.log(2 * lines) - 0.23 * cyclomatic - 16.2 * math.log(lines)
    # Round half up
    scaled = math.floor(mi * 100 / 171 + 0.5)
    return max(0, min(100, scaled))


class ComplexityMetrics:
    """Utility class for small, language-agnostic metric rules."""

    @staticmethod
    def calculate_cognitive_increment(nesting_level: int) -> int:
        """Increment for a structure that nests: 1 plus the current nesting level."""
        return 1 + max(0, nesting_level)

    @staticmethod
    def classify_complexity_level(score: int) -> Tuple[str, str]:
        """Classify a cyclomatic score and provide a risk description.

        Args:
            score: Complexity score

        Returns:
            Tuple of (classification, description)
        """
        if score <= 5:
            return ("Simple", "Low Risk")
        elif score <= 10:
            return ("Moderate", "Medium Risk")
        elif score <= 20:
            return ("Complex", "High Risk")
        elif score <= 50:
            return ("Very Complex", "Very High Risk")
        else:
            return ("Extremely Complex", "Unmaintainable")

    @staticmethod
    def interpret_complexity(score: int) -> str:
        classification, description = ComplexityMetrics.classify_complexity_level(score)
        return f"{classification} - {description}"


class CyclomaticComplexityCalculator:
    """Cyclomatic complexity: 1 plus one per decision point.

    ``case`` labels, ``&&``/``||`` and ternaries are optional decision points
    controlled by CyclomaticConfig. A plain ``else`` never counts.
    """

    _ALWAYS_COUNTED = {
        ConstructKind.IF: "if_statements",
        ConstructKind.ELSE_IF: "else_if_statements",
        ConstructKind.WHILE: "while_loops",
        ConstructKind.FOR: "for_loops",
        ConstructKind.DO: "do_while_loops",
        ConstructKind.SWITCH: "switch_statements",
        ConstructKind.CATCH: "catch_blocks",
    }

    def __init__(self, config: Optional[CyclomaticConfig] = None):
        self.config = config or CyclomaticConfig()

    def _optional_categories(self) -> Dict[ConstructKind, str]:
        categories = {}
        if self.config.count_case_statements:
            categories[ConstructKind.CASE] = "case_statements"
        if self.config.count_logical_operators:
            categories[ConstructKind.LOGICAL_AND] = "logical_and"
            categories[ConstructKind.LOGICAL_OR] = "logical_or"
        if self.config.count_ternary:
            categories[ConstructKind.TERNARY] = "ternary_operators"
        return categories

    def breakdown(self, constructs: Iterable[ControlConstruct]) -> Dict[str, int]:
        """Count decision points per category."""
        categories = dict(self._ALWAYS_COUNTED)
        categories.update(self._optional_categories())

        counts = {name: 0 for name in categories.values()}
        for construct in constructs:
            name = categories.get(construct.kind)
            if name is not None:
                counts[name] += 1
        return counts

    def calculate_from_constructs(self, constructs: Iterable[ControlConstruct]) -> int:
        return 1 + sum(self.breakdown(constructs).values())

    def calculate(self, text: str) -> int:
        """Calculate cyclomatic complexity of normalized text.

        Args:
            text: Normalized source text

        Returns:
            Cyclomatic complexity, at least 1
        """
        if not text or not text.strip():
            return 1
        return self.calculate_from_constructs(find_control_constructs(text))

    def calculate_detailed(self, text: str) -> Dict[str, Any]:
        """Calculate cyclomatic complexity with a per-category breakdown.

        Returns:
            Dictionary with ``total``, ``breakdown`` and ``interpretation``
        """
        if not text or not text.strip():
            return {
                "total": 1,
                "breakdown": {},
                "interpretation": ComplexityMetrics.interpret_complexity(1),
            }

        counts = self.breakdown(find_control_constructs(text))
        total = 1 + sum(counts.values())
        return {
            "total": total,
            "breakdown": counts,
            "interpretation": ComplexityMetrics.interpret_complexity(total),
        }


class CognitiveComplexityCalculator:
    """Cognitive complexity: how hard the control flow is to follow.

    Structures that nest cost 1 plus the nesting they sit at; ``else``,
    ``else if``, each boolean operator and labeled jumps cost a flat 1.
    """

    _NESTED_INCREMENT = frozenset({
        ConstructKind.IF,
        ConstructKind.FOR,
        ConstructKind.WHILE,
        ConstructKind.DO,
        ConstructKind.SWITCH,
        ConstructKind.CATCH,
        ConstructKind.TERNARY,
    })
    _FLAT_INCREMENT = frozenset({
        ConstructKind.ELSE,
        ConstructKind.ELSE_IF,
        ConstructKind.LOGICAL_AND,
        ConstructKind.LOGICAL_OR,
        ConstructKind.LABELED_JUMP,
    })

    def calculate_from_constructs(self, constructs: Iterable[ControlConstruct]) -> int:
        total = 0
        for construct in constructs:
            if construct.do_while_tail:
                continue
            if construct.kind in self._NESTED_INCREMENT:
                total += ComplexityMetrics.calculate_cognitive_increment(construct.nesting)
            elif construct.kind in self._FLAT_INCREMENT:
                total += 1
        return total

    def calculate(self, text: str) -> int:
        """Calculate cognitive complexity of normalized text."""
        if not text or not text.strip():
            return 0
        return self.calculate_from_constructs(find_control_constructs(text))
