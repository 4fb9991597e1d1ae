"""Data models for language detection."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class DetectionMethod(Enum):
    """Methods used for language detection, in the order they are tried."""

    EXTENSION = "extension"
    MIME_TYPE = "mime_type"
    SHEBANG = "shebang"
    KEYWORDS = "keywords"


@dataclass
class LanguageDetectionResult:
    """Result of language detection with confidence score."""

    language: str
    confidence: float
    method: DetectionMethod

    def __repr__(self) -> str:
        return f"LanguageDetectionResult(language='{self.language}', confidence={self.confidence:.2f}, method={self.method.value})"


@dataclass(frozen=True)
class LanguageProfile:
    """Detection data registered for one language.

    Attributes:
        name: Language identifier returned by the detector
        extensions: File suffixes including the dot (".java")
        mime_types: MIME types that map onto this language
        shebang: Regular expression matched against a ``#!`` first line
        keywords: Lower-case snippets counted by the content heuristic
    """

    name: str
    extensions: Tuple[str, ...] = ()
    mime_types: Tuple[str, ...] = ()
    shebang: Optional[str] = None
    keywords: Tuple[str, ...] = field(default=())
