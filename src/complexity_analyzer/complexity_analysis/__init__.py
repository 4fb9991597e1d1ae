"""Unified complexity analysis system for multiple programming languages.

This module provides a plugin-based architecture for analyzing code complexity
across different programming languages while maintaining consistent interfaces
and metrics.
"""

from .aggregation import AggregateReport, BatchResult, EntityReference, MetricsAccumulator, StatSummary
from .base_analyzer import (
    BraceLanguageScanner,
    NormalizationRules,
    ScannerRegistry,
    StructuralScanner,
    create_default_registry,
    default_registry,
)
from .calculators import (
    CognitiveComplexityCalculator,
    CyclomaticComplexityCalculator,
    calculate_maintainability_index,
    calculate_nesting_depth,
    find_control_constructs,
)
from .errors import (
    ComplexityAnalysisError,
    FileTooLargeError,
    ScanError,
    ScannerRegistrationError,
    UnsupportedLanguageError,
)
from .filesystem import DirEntry, FileStat, FileSystem, LocalFileSystem
from .models import (
    AnalysisError,
    AnalysisResult,
    ComplexityGrade,
    ComplexityScore,
    ConstructKind,
    ControlConstruct,
    EntityKind,
    ErrorKind,
    SourceUnit,
    StructuralEntity,
    StructuralModel,
)
from .orchestrator import ComplexityAnalyzer

__all__ = [
    "AggregateReport",
    "AnalysisError",
    "AnalysisResult",
    "BatchResult",
    "BraceLanguageScanner",
    "CognitiveComplexityCalculator",
    "ComplexityAnalysisError",
    "ComplexityAnalyzer",
    "ComplexityGrade",
    "ComplexityScore",
    "ConstructKind",
    "ControlConstruct",
    "CyclomaticComplexityCalculator",
    "DirEntry",
    "EntityKind",
    "EntityReference",
    "ErrorKind",
    "FileStat",
    "FileSystem",
    "FileTooLargeError",
    "LocalFileSystem",
    "MetricsAccumulator",
    "NormalizationRules",
    "ScanError",
    "ScannerRegistrationError",
    "ScannerRegistry",
    "SourceUnit",
    "StatSummary",
    "StructuralEntity",
    "StructuralModel",
    "StructuralScanner",
    "UnsupportedLanguageError",
    "calculate_maintainability_index",
    "calculate_nesting_depth",
    "create_default_registry",
    "default_registry",
    "find_control_constructs",
]
