"""Batch aggregation of per-file analysis results.

Each file becomes an immutable MetricsAccumulator; accumulators merge with
an associative, commutative ``combine`` so a batch can be folded in any
grouping and still produce the same AggregateReport.
"""

from collections import Counter
from dataclasses import dataclass, field
from functools import reduce
from typing import Any, Dict, Iterable, List, Optional

from .models import AnalysisResult, ErrorKind, StructuralEntity


@dataclass(frozen=True)
class StatSummary:
    """Minimum, maximum, average and total of a metric over analyzed files."""

    min: float = 0
    max: float = 0
    avg: float = 0.0
    total: float = 0

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.min, "max": self.max, "avg": self.avg, "total": self.total}


@dataclass(frozen=True)
class EntityReference:
    """Points at an entity of some analyzed file without owning it.

    ``order`` is the processing index of the file within its batch and
    breaks ties between equally complex entities: first seen wins.
    """

    file_path: str
    name: str
    line_start: int
    cyclomatic: int
    order: int = 0

    @classmethod
    def from_entity(cls, file_path: str, entity: StructuralEntity, order: int) -> "EntityReference":
        return cls(
            file_path=file_path,
            name=entity.name,
            line_start=entity.line_start,
            cyclomatic=entity.score.cyclomatic if entity.score else 1,
            order=order,
        )

    def outranks(self, other: Optional["EntityReference"]) -> bool:
        """Higher cyclomatic wins; ties go to the earlier file, then the earlier line."""
        if other is None:
            return True
        if self.cyclomatic != other.cyclomatic:
            return self.cyclomatic > other.cyclomatic
        return (self.order, self.line_start, self.name) < (other.order, other.line_start, other.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file_path,
            "name": self.name,
            "line_start": self.line_start,
            "cyclomatic": self.cyclomatic,
        }


def _pick(
    first: Optional[EntityReference],
    second: Optional[EntityReference],
) -> Optional[EntityReference]:
    if first is None:
        return second
    return first if first.outranks(second) else second


def _most_complex(
    file_path: str,
    entities: Iterable[StructuralEntity],
    order: int,
) -> Optional[EntityReference]:
    best = None
    for entity in entities:
        best = _pick(best, EntityReference.from_entity(file_path, entity, order))
    return best


def _merge_min(first: Optional[int], second: Optional[int]) -> Optional[int]:
    if first is None:
        return second
    if second is None:
        return first
    return min(first, second)


def _merge_max(first: Optional[int], second: Optional[int]) -> Optional[int]:
    if first is None:
        return second
    if second is None:
        return first
    return max(first, second)


def _merge_counts(first: Dict[str, int], second: Dict[str, int]) -> Dict[str, int]:
    merged = Counter(first)
    merged.update(second)
    return dict(merged)


@dataclass
class AggregateReport:
    """Batch-level summary; numeric aggregates cover successful files only."""

    total_files: int = 0
    analyzed_files: int = 0
    error_files: int = 0
    cancelled_files: int = 0
    error_kinds: Dict[str, int] = field(default_factory=dict)
    languages: Dict[str, int] = field(default_factory=dict)
    total_lines: int = 0
    total_size: int = 0
    cyclomatic: StatSummary = field(default_factory=StatSummary)
    cognitive: StatSummary = field(default_factory=StatSummary)
    total_functions: int = 0
    total_classes: int = 0
    most_complex_function: Optional[EntityReference] = None
    most_complex_class: Optional[EntityReference] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "total_files": self.total_files,
            "analyzed_files": self.analyzed_files,
            "error_files": self.error_files,
            "cancelled_files": self.cancelled_files,
            "error_kinds": dict(sorted(self.error_kinds.items())),
            "languages": dict(sorted(self.languages.items())),
            "total_lines": self.total_lines,
            "total_size": self.total_size,
            "cyclomatic": self.cyclomatic.to_dict(),
            "cognitive": self.cognitive.to_dict(),
            "total_functions": self.total_functions,
            "total_classes": self.total_classes,
            "most_complex_function": (
                self.most_complex_function.to_dict() if self.most_complex_function else None
            ),
            "most_complex_class": (
                self.most_complex_class.to_dict() if self.most_complex_class else None
            ),
        }


@dataclass(frozen=True)
class MetricsAccumulator:
    """Immutable partial aggregate of one or more files."""

    total_files: int = 0
    analyzed_files: int = 0
    error_files: int = 0
    cancelled_files: int = 0
    error_kinds: Dict[str, int] = field(default_factory=dict)
    languages: Dict[str, int] = field(default_factory=dict)
    total_lines: int = 0
    total_size: int = 0
    cyclomatic_min: Optional[int] = None
    cyclomatic_max: Optional[int] = None
    cyclomatic_total: int = 0
    cognitive_min: Optional[int] = None
    cognitive_max: Optional[int] = None
    cognitive_total: int = 0
    total_functions: int = 0
    total_classes: int = 0
    most_complex_function: Optional[EntityReference] = None
    most_complex_class: Optional[EntityReference] = None

    @classmethod
    def from_result(cls, result: AnalysisResult, order: int = 0) -> "MetricsAccumulator":
        """Build the accumulator of a single file.

        Args:
            result: Per-file analysis result
            order: Processing index of the file within its batch
        """
        if not result.success:
            kind = result.error.kind
            return cls(
                total_files=1,
                error_files=1,
                cancelled_files=1 if kind is ErrorKind.CANCELLED else 0,
                error_kinds={kind.value: 1},
            )

        score = result.score
        functions = result.functions
        classes = result.classes
        return cls(
            total_files=1,
            analyzed_files=1,
            languages={result.language: 1} if result.language else {},
            total_lines=result.lines,
            total_size=result.size,
            cyclomatic_min=score.cyclomatic,
            cyclomatic_max=score.cyclomatic,
            cyclomatic_total=score.cyclomatic,
            cognitive_min=score.cognitive,
            cognitive_max=score.cognitive,
            cognitive_total=score.cognitive,
            total_functions=len(functions),
            total_classes=len(classes),
            most_complex_function=_most_complex(result.path, functions, order),
            most_complex_class=_most_complex(result.path, classes, order),
        )

    def combine(self, other: "MetricsAccumulator") -> "MetricsAccumulator":
        """Merge two accumulators; associative and commutative."""
        return MetricsAccumulator(
            total_files=self.total_files + other.total_files,
            analyzed_files=self.analyzed_files + other.analyzed_files,
            error_files=self.error_files + other.error_files,
            cancelled_files=self.cancelled_files + other.cancelled_files,
            error_kinds=_merge_counts(self.error_kinds, other.error_kinds),
            languages=_merge_counts(self.languages, other.languages),
            total_lines=self.total_lines + other.total_lines,
            total_size=self.total_size + other.total_size,
            cyclomatic_min=_merge_min(self.cyclomatic_min, other.cyclomatic_min),
            cyclomatic_max=_merge_max(self.cyclomatic_max, other.cyclomatic_max),
            cyclomatic_total=self.cyclomatic_total + other.cyclomatic_total,
            cognitive_min=_merge_min(self.cognitive_min, other.cognitive_min),
            cognitive_max=_merge_max(self.cognitive_max, other.cognitive_max),
            cognitive_total=self.cognitive_total + other.cognitive_total,
            total_functions=self.total_functions + other.total_functions,
            total_classes=self.total_classes + other.total_classes,
            most_complex_function=_pick(self.most_complex_function, other.most_complex_function),
            most_complex_class=_pick(self.most_complex_class, other.most_complex_class),
        )

    def _summary(self, minimum: Optional[int], maximum: Optional[int], total: int) -> StatSummary:
        if self.analyzed_files == 0:
            return StatSummary()
        return StatSummary(
            min=minimum or 0,
            max=maximum or 0,
            avg=round(total / self.analyzed_files, 2),
            total=total,
        )

    def finalize(self) -> AggregateReport:
        """Produce the AggregateReport; every empty aggregate is 0."""
        return AggregateReport(
            total_files=self.total_files,
            analyzed_files=self.analyzed_files,
            error_files=self.error_files,
            cancelled_files=self.cancelled_files,
            error_kinds=dict(self.error_kinds),
            languages=dict(self.languages),
            total_lines=self.total_lines,
            total_size=self.total_size,
            cyclomatic=self._summary(self.cyclomatic_min, self.cyclomatic_max, self.cyclomatic_total),
            cognitive=self._summary(self.cognitive_min, self.cognitive_max, self.cognitive_total),
            total_functions=self.total_functions,
            total_classes=self.total_classes,
            most_complex_function=self.most_complex_function,
            most_complex_class=self.most_complex_class,
        )


def aggregate(results: Iterable[AnalysisResult]) -> AggregateReport:
    """Fold results in order; the position of each result is its processing index."""
    accumulators = (
        MetricsAccumulator.from_result(result, order) for order, result in enumerate(results)
    )
    return reduce(MetricsAccumulator.combine, accumulators, MetricsAccumulator()).finalize()


@dataclass
class BatchResult:
    """Per-file results in input order plus the batch report."""

    results: List[AnalysisResult] = field(default_factory=list)
    report: AggregateReport = field(default_factory=AggregateReport)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "summary": self.report.to_dict(),
            "files": [result.to_dict() for result in self.results],
        }
