"""Language detection module for complexity-analyzer."""

from .models import (
    LanguageDetectionResult,
    LanguageProfile,
    DetectionMethod,
)
from .detector import DEFAULT_LANGUAGE_PROFILES, LanguageDetector

__all__ = [
    "LanguageDetector",
    "LanguageDetectionResult",
    "LanguageProfile",
    "DetectionMethod",
    "DEFAULT_LANGUAGE_PROFILES",
]
