"""Tests for configuration loading and validation."""

import pytest

from complexity_analyzer.config import (
    DEFAULT_MAX_FILE_SIZE,
    AnalyzerConfig,
    ComplexityThresholds,
    CyclomaticConfig,
)


class TestAnalyzerConfig:
    """Test AnalyzerConfig defaults, validation and loaders."""

    def test_defaults(self):
        config = AnalyzerConfig()

        assert config.include_tests is False
        assert config.include_node_modules is False
        assert config.max_file_size == DEFAULT_MAX_FILE_SIZE == 1024 * 1024
        assert config.timeout_ms == 30000
        assert config.timeout_seconds == 30.0
        assert config.max_concurrency == 10
        assert config.cyclomatic == CyclomaticConfig()
        assert config.thresholds == ComplexityThresholds(low=5, medium=10, high=20)
        assert config.ignore_patterns == []
        assert config.use_gitignore is True

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_file_size": 0}, {"timeout_ms": 0}, {"max_concurrency": 0}],
    )
    def test_invalid_limits(self, kwargs):
        with pytest.raises(ValueError):
            AnalyzerConfig(**kwargs)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("COMPLEXITY_INCLUDE_TESTS", "true")
        monkeypatch.setenv("COMPLEXITY_MAX_FILE_SIZE", "2048")
        monkeypatch.setenv("COMPLEXITY_TIMEOUT_MS", "500")
        monkeypatch.setenv("COMPLEXITY_MAX_CONCURRENCY", "2")
        monkeypatch.setenv("COMPLEXITY_COUNT_TERNARY", "no")
        monkeypatch.setenv("COMPLEXITY_THRESHOLD_HIGH", "30")
        monkeypatch.setenv("COMPLEXITY_IGNORE_PATTERNS", "vendor/, *.min.js")

        config = AnalyzerConfig.from_env()

        assert config.include_tests is True
        assert config.include_node_modules is False
        assert config.max_file_size == 2048
        assert config.timeout_ms == 500
        assert config.max_concurrency == 2
        assert config.cyclomatic.count_ternary is False
        assert config.cyclomatic.count_case_statements is True
        assert config.thresholds.high == 30
        assert config.ignore_patterns == ["vendor/", "*.min.js"]
        assert config.use_gitignore is True

    def test_from_env_rejects_non_integers(self, monkeypatch):
        monkeypatch.setenv("COMPLEXITY_TIMEOUT_MS", "soon")
        with pytest.raises(ValueError, match="COMPLEXITY_TIMEOUT_MS"):
            AnalyzerConfig.from_env()

    def test_from_dict(self):
        config = AnalyzerConfig.from_dict(
            {
                "includeTests": True,
                "includeNodeModules": True,
                "maxFileSize": 4096,
                "timeout": 1000,
                "maxConcurrency": 4,
                "countCaseStatements": False,
                "ignorePatterns": ["generated/"],
                "useGitignore": False,
                "thresholds": {"low": 3, "medium": 6, "high": 9},
                "someOtherTool": {"ignored": True},
            }
        )

        assert config.include_tests is True
        assert config.include_node_modules is True
        assert config.max_file_size == 4096
        assert config.timeout_ms == 1000
        assert config.max_concurrency == 4
        assert config.cyclomatic.count_case_statements is False
        assert config.cyclomatic.count_logical_operators is True
        assert config.thresholds == ComplexityThresholds(low=3, medium=6, high=9)
        assert config.ignore_patterns == ["generated/"]
        assert config.use_gitignore is False

    def test_from_dict_empty(self):
        assert AnalyzerConfig.from_dict({}) == AnalyzerConfig()


class TestComplexityThresholds:
    def test_ordering_is_validated(self):
        with pytest.raises(ValueError):
            ComplexityThresholds(low=10, medium=5, high=20)
        with pytest.raises(ValueError):
            ComplexityThresholds(low=0)

    def test_classify(self):
        thresholds = ComplexityThresholds()

        assert thresholds.classify(5) == "low"
        assert thresholds.classify(10) == "medium"
        assert thresholds.classify(20) == "high"
        assert thresholds.classify(21) == "very-high"
