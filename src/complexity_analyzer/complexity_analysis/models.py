"""Data models for complexity analysis results.

Provides consistent data structures for representing structure and
complexity metrics across different programming languages.
"""

import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, Iterator, List, Optional

if TYPE_CHECKING:
    from ..config import ComplexityThresholds


ANONYMOUS = "anonymous"


class ComplexityGrade(Enum):
    """Letter grades for code complexity based on maintainability index."""

    A = "A"  # Excellent (MI >= 80)
    B = "B"  # Good (MI >= 60)
    C = "C"  # Fair (MI >= 40)
    D = "D"  # Poor (MI >= 20)
    F = "F"  # Very Poor (MI < 20)

    @classmethod
    def from_maintainability_index(cls, mi: float) -> "ComplexityGrade":
        """Calculate grade from maintainability index score."""
        if mi >= 80:
            return cls.A
        elif mi >= 60:
            return cls.B
        elif mi >= 40:
            return cls.C
        elif mi >= 20:
            return cls.D
        else:
            return cls.F


class EntityKind(Enum):
    FUNCTION = "function"
    CLASS = "class"


class ConstructKind(Enum):
    """Decision-bearing constructs recognised by the calculators."""

    IF = "if"
    ELSE_IF = "else_if"
    ELSE = "else"
    FOR = "for"
    WHILE = "while"
    DO = "do"
    SWITCH = "switch"
    CASE = "case"
    CATCH = "catch"
    LOGICAL_AND = "logical_and"
    LOGICAL_OR = "logical_or"
    TERNARY = "ternary"
    LABELED_JUMP = "labeled_jump"


class ErrorKind(Enum):
    """Why a single file could not be analyzed."""

    NOT_FOUND = "not_found"
    UNREADABLE = "unreadable"
    UNSUPPORTED = "unsupported"
    TOO_LARGE = "too_large"
    SCAN_FAILURE = "scan_failure"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


@dataclass
class SourceUnit:
    """One file's content as seen by a single analysis call."""

    path: str
    language: str
    text: str
    size: int

    @property
    def line_count(self) -> int:
        return len(self.text.splitlines())


@dataclass(frozen=True)
class ControlConstruct:
    """An occurrence of a decision construct with the nesting active at that point.

    ``do_while_tail`` marks the ``while`` that closes a ``do`` block; it is a
    decision point but not a new structure for a reader.
    """

    kind: ConstructKind
    line: int
    nesting: int = 0
    do_while_tail: bool = False


@dataclass(frozen=True)
class ComplexityScore:
    """Complexity scores for an entity or a whole file."""

    cyclomatic: int = 1
    cognitive: int = 0
    nesting_depth: int = 0
    maintainability: int = 100

    def __post_init__(self):
        if self.cyclomatic < 1:
            raise ValueError(f"Cyclomatic complexity cannot be below 1, got {self.cyclomatic}")
        if self.cognitive < 0:
            raise ValueError(f"Cognitive complexity cannot be negative, got {self.cognitive}")
        if self.nesting_depth < 0:
            raise ValueError(f"Nesting depth cannot be negative, got {self.nesting_depth}")
        if not 0 <= self.maintainability <= 100:
            raise ValueError(f"Maintainability index must be within 0-100, got {self.maintainability}")

    @property
    def grade(self) -> ComplexityGrade:
        return ComplexityGrade.from_maintainability_index(self.maintainability)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "cyclomatic": self.cyclomatic,
            "cognitive": self.cognitive,
            "nesting_depth": self.nesting_depth,
            "maintainability": self.maintainability,
            "grade": self.grade.value,
        }


@dataclass
class StructuralEntity:
    """A function, method or class found by a structural scanner.

    Line numbers are 1-indexed and inclusive. ``closed`` is False when the
    scanner never found the closing brace and extended the entity to the end
    of the file. ``column_start`` and ``column_end`` narrow the span on its
    first and last line; ``column_end`` is exclusive and None means the end
    of the line.
    """

    kind: EntityKind
    name: str
    line_start: int
    line_end: int
    parameters: int = 0
    children: List["StructuralEntity"] = field(default_factory=list)
    properties: List[str] = field(default_factory=list)
    closed: bool = True
    has_body: bool = True
    column_start: int = 0
    column_end: Optional[int] = None
    score: Optional[ComplexityScore] = None
    source_ref: Optional["weakref.ReferenceType[SourceUnit]"] = field(
        default=None, repr=False, compare=False
    )

    @property
    def source(self) -> Optional[SourceUnit]:
        """The SourceUnit this entity was scanned from, if still alive."""
        return self.source_ref() if self.source_ref is not None else None

    def attach(self, source: SourceUnit) -> None:
        """Point this entity and its children back at their SourceUnit."""
        self.source_ref = weakref.ref(source)
        for child in self.children:
            child.attach(source)

    @property
    def lines_of_code(self) -> int:
        """Calculate lines of code for this entity."""
        return self.line_end - self.line_start + 1

    def span_text(self, lines: List[str]) -> str:
        """Slice this entity's text out of the file's lines."""
        selected = lines[self.line_start - 1:self.line_end]
        if not selected:
            return ""
        selected = list(selected)
        if self.column_end is not None:
            selected[-1] = selected[-1][:self.column_end]
        selected[0] = " " * self.column_start + selected[0][self.column_start:]
        return "\n".join(selected)

    @property
    def methods(self) -> List["StructuralEntity"]:
        return [c for c in self.children if c.kind is EntityKind.FUNCTION]

    @property
    def nested_classes(self) -> List["StructuralEntity"]:
        return [c for c in self.children if c.kind is EntityKind.CLASS]

    def reference(self) -> Dict[str, Any]:
        """Name and start line, enough to find the entity in the flat lists."""
        return {"name": self.name, "line_start": self.line_start}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = {
            "kind": self.kind.value,
            "name": self.name,
            "line_start": self.line_start,
            "line_end": self.line_end,
            "lines_of_code": self.lines_of_code,
            "parameters": self.parameters,
            "complexity": self.score.to_dict() if self.score else None,
        }
        if self.kind is EntityKind.CLASS:
            # Members are serialized in full once, in the file's flat lists
            result["methods"] = [m.reference() for m in self.methods]
            result["nested_classes"] = [c.reference() for c in self.nested_classes]
            result["properties"] = list(self.properties)
        if not self.closed:
            result["closed"] = False
        return result


def iter_entities(entities: Iterable[StructuralEntity]) -> Iterator[StructuralEntity]:
    """Walk entities depth-first, parents before children."""
    for entity in entities:
        yield entity
        yield from iter_entities(entity.children)


@dataclass
class StructuralModel:
    """Minimal structural model produced by a scanner."""

    normalized_text: str
    entities: List[StructuralEntity] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def functions(self) -> List[StructuralEntity]:
        return [e for e in iter_entities(self.entities) if e.kind is EntityKind.FUNCTION]

    @property
    def classes(self) -> List[StructuralEntity]:
        return [e for e in iter_entities(self.entities) if e.kind is EntityKind.CLASS]


@dataclass(frozen=True)
class AnalysisError:
    kind: ErrorKind
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


@dataclass
class AnalysisResult:
    """Complete analysis result for a file: either a success or a failure.

    Use ``AnalysisResult.succeeded`` and ``AnalysisResult.failed`` to build
    one; a failed result never carries a source, entities or scores.
    """

    path: str
    language: Optional[str] = None
    source: Optional[SourceUnit] = field(default=None, repr=False)
    entities: List[StructuralEntity] = field(default_factory=list)
    score: Optional[ComplexityScore] = None
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    error: Optional[AnalysisError] = None

    def __post_init__(self):
        if self.error is None:
            if self.source is None or self.score is None:
                raise ValueError("A successful result needs a source unit and a score")
        elif self.source is not None or self.score is not None or self.entities:
            raise ValueError("A failed result cannot carry a source, entities or scores")

    @classmethod
    def succeeded(
        cls,
        source: SourceUnit,
        entities: List[StructuralEntity],
        score: ComplexityScore,
        warnings: Optional[List[str]] = None,
    ) -> "AnalysisResult":
        return cls(
            path=source.path,
            language=source.language,
            source=source,
            entities=entities,
            score=score,
            warnings=list(warnings or []),
        )

    @classmethod
    def failed(
        cls,
        path: str,
        kind: ErrorKind,
        message: str,
        language: Optional[str] = None,
    ) -> "AnalysisResult":
        return cls(path=path, language=language, error=AnalysisError(kind, message))

    @property
    def success(self) -> bool:
        """Check if analysis was successful."""
        return self.error is None

    @property
    def functions(self) -> List[StructuralEntity]:
        return [e for e in iter_entities(self.entities) if e.kind is EntityKind.FUNCTION]

    @property
    def classes(self) -> List[StructuralEntity]:
        return [e for e in iter_entities(self.entities) if e.kind is EntityKind.CLASS]

    @property
    def lines(self) -> int:
        return self.source.line_count if self.source else 0

    @property
    def size(self) -> int:
        return self.source.size if self.source else 0

    def generate_recommendations(self, thresholds: "ComplexityThresholds") -> List[str]:
        """Generate recommendations based on complexity metrics."""
        if not self.success:
            return []

        recommendations = []
        functions = self.functions

        very_complex = [f for f in functions if f.score and f.score.cyclomatic > thresholds.high]
        complex_funcs = [
            f for f in functions
            if f.score and thresholds.medium < f.score.cyclomatic <= thresholds.high
        ]
        for func in sorted(very_complex, key=lambda f: -f.score.cyclomatic)[:3]:
            recommendations.append(
                f"Urgent: Refactor '{func.name}' (complexity: {func.score.cyclomatic})"
            )
        if not very_complex:
            for func in sorted(complex_funcs, key=lambda f: -f.score.cyclomatic)[:3]:
                recommendations.append(
                    f"Consider refactoring '{func.name}' (complexity: {func.score.cyclomatic})"
                )

        if functions:
            average = sum(f.score.cyclomatic for f in functions if f.score) / len(functions)
            if average > thresholds.medium:
                recommendations.append(
                    f"High average complexity ({average:.1f}). Consider breaking down functions"
                )

        if self.score.maintainability < 20:
            recommendations.append("Low maintainability index. Code needs significant refactoring")
        elif self.score.maintainability < 40:
            recommendations.append("Moderate maintainability index. Consider improving code structure")

        deep_nested = [f for f in functions if f.score and f.score.nesting_depth > 4]
        if deep_nested:
            recommendations.append(
                f"{len(deep_nested)} function(s) have deep nesting (>4 levels). "
                "Consider extracting nested logic"
            )

        long_params = [f for f in functions if f.parameters > 5]
        if long_params:
            recommendations.append(
                f"{len(long_params)} function(s) take more than 5 parameters. "
                "Consider introducing a parameter object"
            )

        return recommendations

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        if self.error is not None:
            return {
                "file": self.path,
                "language": self.language,
                "error": self.error.to_dict(),
            }

        return {
            "file": self.path,
            "language": self.language,
            "size": self.size,
            "lines": self.lines,
            "complexity": self.score.to_dict(),
            "functions": [f.to_dict() for f in self.functions],
            "classes": [c.to_dict() for c in self.classes],
            "warnings": list(self.warnings),
            "recommendations": list(self.recommendations),
        }
