"""Staged language detection using file extensions, MIME types and content heuristics."""

import logging
import mimetypes
import re
from pathlib import Path
from re import Pattern
from threading import RLock
from typing import Dict, Iterable, List, Optional, Tuple

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from .models import DetectionMethod, LanguageDetectionResult, LanguageProfile

logger = logging.getLogger(__name__)


# Registration order is significant: it breaks ties in keyword scoring.
DEFAULT_LANGUAGE_PROFILES: Tuple[LanguageProfile, ...] = (
    LanguageProfile(
        name="java",
        extensions=(".java",),
        mime_types=("text/x-java", "text/x-java-source"),
        keywords=(
            "public class", "import java.", "system.out", "@override",
            "private ", "protected ", "package ", "extends ", "implements ",
        ),
    ),
    LanguageProfile(
        name="javascript",
        extensions=(".js", ".jsx", ".mjs", ".cjs"),
        mime_types=("text/javascript", "application/javascript", "application/x-javascript"),
        shebang=r"^#!.*\b(node|nodejs|deno|bun)\b",
        keywords=(
            "function ", "const ", "let ", "=>", "console.log", "require(",
            "module.exports", "export default", "document.",
        ),
    ),
    LanguageProfile(
        name="typescript",
        extensions=(".ts", ".tsx", ".mts", ".cts"),
        mime_types=("application/typescript", "application/x-typescript", "text/x-typescript"),
        shebang=r"^#!.*\b(ts-node|tsx)\b",
        keywords=(
            "interface ", ": string", ": number", ": boolean", "import type",
            "export type", "readonly ", "implements ",
        ),
    ),
    LanguageProfile(
        name="cpp",
        extensions=(".cpp", ".cc", ".cxx", ".c++", ".hpp", ".hh", ".hxx", ".h++", ".C", ".H"),
        mime_types=("text/x-c++src", "text/x-c++hdr", "text/x-c++"),
        keywords=(
            "#include <iostream>", "std::", "namespace ", "template<", "template <",
            "cout <<", "nullptr", "public:", "private:",
        ),
    ),
    LanguageProfile(
        name="c",
        extensions=(".c", ".h"),
        mime_types=("text/x-c", "text/x-csrc", "text/x-chdr"),
        keywords=("#include <stdio.h>", "#include <stdlib.h>", "printf(", "malloc(", "struct ", "typedef "),
    ),
    LanguageProfile(
        name="csharp",
        extensions=(".cs",),
        mime_types=("text/x-csharp",),
        keywords=(
            "using system", "namespace ", "console.writeline", "public class",
            " get; ", " set; ", "async task", "[serializable]",
        ),
    ),
    LanguageProfile(
        name="python",
        extensions=(".py", ".pyw", ".pyi"),
        mime_types=("text/x-python", "application/x-python", "text/x-script.python"),
        shebang=r"^#!.*\bpython[0-9.]*\b",
        keywords=("def ", "import ", "self.", "elif ", "__init__", "print("),
    ),
    LanguageProfile(
        name="ruby",
        extensions=(".rb",),
        mime_types=("text/x-ruby", "application/x-ruby"),
        shebang=r"^#!.*\bruby\b",
        keywords=("require '", "def ", "end\n", "puts ", "attr_accessor"),
    ),
    LanguageProfile(
        name="go",
        extensions=(".go",),
        mime_types=("text/x-go",),
        keywords=("package main", "func ", "fmt.", ":= ", "go func"),
    ),
)


class LanguageDetector:
    """Language detector trying extension, MIME type and content heuristics in turn."""

    def __init__(self, profiles: Optional[Iterable[LanguageProfile]] = None):
        """
        Initialize the detector.

        Args:
            profiles: Language profiles in registration order; defaults to
                DEFAULT_LANGUAGE_PROFILES
        """
        self._lock = RLock()
        self._profiles: Dict[str, LanguageProfile] = {}
        self._shebangs: Dict[str, Pattern[str]] = {}
        for profile in profiles if profiles is not None else DEFAULT_LANGUAGE_PROFILES:
            self.register_profile(profile)

    def register_profile(self, profile: LanguageProfile) -> None:
        """Register or replace the detection data for a language.

        A replaced profile keeps its original registration position.
        """
        with self._lock:
            self._profiles[profile.name] = profile
            if profile.shebang:
                self._shebangs[profile.name] = re.compile(profile.shebang)
            else:
                self._shebangs.pop(profile.name, None)
        logger.debug(f"Registered detection profile for: {profile.name}")

    def unregister_profile(self, language: str) -> bool:
        """Remove a language from every detection table.

        Returns:
            True if the profile was removed, False if not found
        """
        with self._lock:
            if language not in self._profiles:
                return False
            del self._profiles[language]
            self._shebangs.pop(language, None)
            return True

    def supported_languages(self) -> List[str]:
        """Get the registered languages in registration order."""
        with self._lock:
            return list(self._profiles)

    def _snapshot(self) -> List[LanguageProfile]:
        with self._lock:
            return list(self._profiles.values())

    def _detect_from_extension(self, file_path: str) -> Optional[LanguageDetectionResult]:
        """Detect language from the registered extension table."""
        suffix = Path(file_path).suffix
        if not suffix:
            return None

        profiles = self._snapshot()
        # Exact suffix first so that ".C" can differ from ".c"
        for candidate in (suffix, suffix.lower()):
            for profile in profiles:
                if candidate in profile.extensions:
                    return LanguageDetectionResult(profile.name, 0.9, DetectionMethod.EXTENSION)
        return None

    def _guess_mime_types(self, file_path: str) -> List[str]:
        """Collect candidate MIME types for a path."""
        candidates = []
        guessed, _ = mimetypes.guess_type(file_path, strict=False)
        if guessed:
            candidates.append(guessed)

        try:
            lexer = get_lexer_for_filename(Path(file_path).name)
            candidates.extend(lexer.mimetypes)
        except ClassNotFound:
            pass

        return candidates

    def _detect_from_mime_type(self, file_path: str) -> Optional[LanguageDetectionResult]:
        """Detect language from the registered MIME type table."""
        mime_types = self._guess_mime_types(file_path)
        if not mime_types:
            return None

        profiles = self._snapshot()
        for mime_type in mime_types:
            for profile in profiles:
                if mime_type in profile.mime_types:
                    return LanguageDetectionResult(profile.name, 0.8, DetectionMethod.MIME_TYPE)
        return None

    def _detect_from_shebang(self, first_line: str) -> Optional[LanguageDetectionResult]:
        with self._lock:
            shebangs = [(name, self._shebangs[name]) for name in self._profiles if name in self._shebangs]

        for name, pattern in shebangs:
            if pattern.search(first_line):
                return LanguageDetectionResult(name, 0.85, DetectionMethod.SHEBANG)
        return None

    def score_keywords(self, content: str) -> Dict[str, int]:
        """Count keyword occurrences per language in lower-cased content."""
        content_lower = content.lower()
        scores: Dict[str, int] = {}
        for profile in self._snapshot():
            if profile.keywords:
                scores[profile.name] = sum(
                    content_lower.count(keyword.lower()) for keyword in profile.keywords
                )
        return scores

    def _detect_from_content(self, content: str) -> Optional[LanguageDetectionResult]:
        """Detect language from a shebang line or keyword frequencies."""
        if not content or not content.strip():
            return None

        first_line = content.lstrip("\ufeff").split("\n", 1)[0]
        if first_line.startswith("#!"):
            result = self._detect_from_shebang(first_line)
            if result:
                return result

        scores = self.score_keywords(content)
        best_language = None
        best_score = 0
        # Strict comparison keeps the earliest registered language on ties
        for language, score in scores.items():
            if score > best_score:
                best_language, best_score = language, score

        if best_language is None:
            return None

        total = sum(scores.values())
        confidence = round(0.7 * best_score / total, 2) if total else 0.0
        return LanguageDetectionResult(best_language, confidence, DetectionMethod.KEYWORDS)

    def detect(
        self,
        file_path: str,
        content: Optional[str] = None,
    ) -> Optional[LanguageDetectionResult]:
        """
        Detect the language of a file.

        Args:
            file_path: Path used for extension and MIME lookups
            content: Optional file content for the content heuristic

        Returns:
            LanguageDetectionResult or None when no stage yields a match
        """
        result = self._detect_from_extension(file_path)
        if result is None:
            result = self._detect_from_mime_type(file_path)
        if result is None and content is not None:
            result = self._detect_from_content(content)

        if result is None:
            logger.debug(f"No language detected for {file_path}")
        else:
            logger.debug(f"Detected {file_path}: {result}")
        return result

    def detect_language(self, file_path: str, content: Optional[str] = None) -> Optional[str]:
        """Detect the language identifier of a file, or None."""
        result = self.detect(file_path, content)
        return result.language if result else None
