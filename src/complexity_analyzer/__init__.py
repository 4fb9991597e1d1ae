"""Complexity Analyzer - multi-language code complexity estimation."""

__version__ = "0.1.0"

from .complexity_analysis import (
    AnalysisResult,
    BatchResult,
    ComplexityAnalyzer,
    ScannerRegistry,
    create_default_registry,
)
from .config import AnalyzerConfig, ComplexityThresholds, CyclomaticConfig
from .language_detection import LanguageDetector

__all__ = [
    "AnalysisResult",
    "AnalyzerConfig",
    "BatchResult",
    "ComplexityAnalyzer",
    "ComplexityThresholds",
    "CyclomaticConfig",
    "LanguageDetector",
    "ScannerRegistry",
    "create_default_registry",
    "__version__",
]
