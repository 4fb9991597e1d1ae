"""Tests for staged language detection."""

import pytest

from complexity_analyzer.language_detection import (
    DetectionMethod,
    LanguageDetector,
    LanguageProfile,
)
from complexity_analyzer.language_detection.detector import DEFAULT_LANGUAGE_PROFILES


def profile(name):
    return next(p for p in DEFAULT_LANGUAGE_PROFILES if p.name == name)


class TestLanguageDetector:
    """Test each detection stage and its confidence."""

    @pytest.fixture
    def detector(self):
        """Create a detector with the default profiles."""
        return LanguageDetector()

    def test_supported_languages(self, detector):
        assert detector.supported_languages() == [
            "java",
            "javascript",
            "typescript",
            "cpp",
            "c",
            "csharp",
            "python",
            "ruby",
            "go",
        ]

    @pytest.mark.parametrize(
        "path,language",
        [
            ("src/Main.java", "java"),
            ("app.jsx", "javascript"),
            ("app.ts", "typescript"),
            ("lib/geometry.hpp", "cpp"),
            ("Program.cs", "csharp"),
            ("main.c", "c"),
            ("include/util.h", "c"),
            ("tool.py", "python"),
            ("main.go", "go"),
        ],
    )
    def test_extension(self, detector, path, language):
        result = detector.detect(path)

        assert result.language == language
        assert result.method is DetectionMethod.EXTENSION
        assert result.confidence == 0.9

    def test_extension_case(self, detector):
        """The exact suffix wins before the lower-cased one."""
        assert detector.detect_language("legacy.C") == "cpp"
        assert detector.detect_language("legacy.c") == "c"
        assert detector.detect_language("App.TS") == "typescript"

    def test_mime_type(self):
        detector = LanguageDetector(profiles=[LanguageProfile("snake", mime_types=("text/x-python",))])

        result = detector.detect("script.py")

        assert result.language == "snake"
        assert result.method is DetectionMethod.MIME_TYPE
        assert result.confidence == 0.8

    def test_shebang(self, detector):
        result = detector.detect("bin/serve", "#!/usr/bin/env node\nconsole.log(1);\n")

        assert result.language == "javascript"
        assert result.method is DetectionMethod.SHEBANG
        assert result.confidence == 0.85

    def test_shebang_after_byte_order_mark(self, detector):
        assert detector.detect_language("run", "\ufeff#!/usr/bin/python3\nprint(1)\n") == "python"

    def test_keywords(self, detector):
        result = detector.detect("snippet", "public class Foo {\n    private int x;\n}\n")

        assert result.language == "java"
        assert result.method is DetectionMethod.KEYWORDS
        assert result.confidence == 0.47

    def test_keyword_tie_goes_to_first_registered(self):
        content = "public class X"

        assert LanguageDetector().detect_language("snippet", content) == "java"
        reordered = LanguageDetector(profiles=[profile("csharp"), profile("java")])
        assert reordered.detect_language("snippet", content) == "csharp"

    def test_extension_wins_over_content(self, detector):
        assert detector.detect_language("Main.java", "#!/usr/bin/env node\n") == "java"

    def test_nothing_detected(self, detector):
        assert detector.detect("data.unknownext") is None
        assert detector.detect("data.unknownext", "") is None
        assert detector.detect("snippet", "hello world") is None

    def test_register_and_unregister_profile(self, detector):
        detector.register_profile(LanguageProfile("kotlin", extensions=(".kt",)))
        assert detector.detect_language("Main.kt") == "kotlin"

        assert detector.unregister_profile("kotlin") is True
        assert detector.detect("Main.kt") is None
        assert detector.unregister_profile("kotlin") is False

    def test_score_keywords(self, detector):
        scores = detector.score_keywords("package main\nfunc main() {\n\tfmt.Println(1)\n}\n")
        assert scores["go"] == 3
        assert max(scores, key=scores.get) == "go"
