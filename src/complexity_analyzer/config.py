"""Configuration for complexity-analyzer."""

import os
from dataclasses import dataclass, field
from typing import Any, List, Mapping

DEFAULT_MAX_FILE_SIZE = 1024 * 1024  # 1MB
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_MAX_CONCURRENCY = 10


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> List[str]:
    value = os.getenv(name)
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {value!r}")


@dataclass
class CyclomaticConfig:
    """Toggles for the optional cyclomatic decision points."""

    count_case_statements: bool = True
    count_logical_operators: bool = True
    count_ternary: bool = True

    @classmethod
    def from_env(cls) -> "CyclomaticConfig":
        """Create configuration from environment variables."""
        return cls(
            count_case_statements=_env_bool("COMPLEXITY_COUNT_CASE_STATEMENTS", True),
            count_logical_operators=_env_bool("COMPLEXITY_COUNT_LOGICAL_OPERATORS", True),
            count_ternary=_env_bool("COMPLEXITY_COUNT_TERNARY", True),
        )


@dataclass
class ComplexityThresholds:
    """Cyclomatic thresholds separating low, medium, high and very high risk."""

    low: int = 5
    medium: int = 10
    high: int = 20

    def __post_init__(self):
        """Validate threshold ordering."""
        if self.low < 1:
            raise ValueError("Low threshold must be at least 1")
        if not self.low <= self.medium <= self.high:
            raise ValueError(
                f"Thresholds must be ordered low <= medium <= high, "
                f"got {self.low}/{self.medium}/{self.high}"
            )

    def classify(self, complexity: int) -> str:
        """Map a cyclomatic score onto a risk level."""
        if complexity <= self.low:
            return "low"
        elif complexity <= self.medium:
            return "medium"
        elif complexity <= self.high:
            return "high"
        else:
            return "very-high"


@dataclass
class AnalyzerConfig:
    """Main configuration for the analysis engine."""

    include_tests: bool = False
    include_node_modules: bool = False
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    ignore_patterns: List[str] = field(default_factory=list)
    use_gitignore: bool = True
    cyclomatic: CyclomaticConfig = field(default_factory=CyclomaticConfig)
    thresholds: ComplexityThresholds = field(default_factory=ComplexityThresholds)

    def __post_init__(self):
        """Validate numeric limits."""
        if self.max_file_size <= 0:
            raise ValueError("max_file_size must be a positive number of bytes")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be a positive number of milliseconds")
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @classmethod
    def from_env(cls) -> "AnalyzerConfig":
        """Create configuration from environment variables."""
        return cls(
            include_tests=_env_bool("COMPLEXITY_INCLUDE_TESTS", False),
            include_node_modules=_env_bool("COMPLEXITY_INCLUDE_NODE_MODULES", False),
            max_file_size=_env_int("COMPLEXITY_MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE),
            timeout_ms=_env_int("COMPLEXITY_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
            max_concurrency=_env_int("COMPLEXITY_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY),
            ignore_patterns=_env_list("COMPLEXITY_IGNORE_PATTERNS"),
            use_gitignore=_env_bool("COMPLEXITY_USE_GITIGNORE", True),
            cyclomatic=CyclomaticConfig.from_env(),
            thresholds=ComplexityThresholds(
                low=_env_int("COMPLEXITY_THRESHOLD_LOW", 5),
                medium=_env_int("COMPLEXITY_THRESHOLD_MEDIUM", 10),
                high=_env_int("COMPLEXITY_THRESHOLD_HIGH", 20),
            ),
        )

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "AnalyzerConfig":
        """
        Create configuration from a mapping using the config file option names.

        Unknown keys are ignored so that a shared config file can carry
        options for other tools.

        Args:
            options: Mapping such as ``{"includeTests": True, "maxFileSize": 2048}``

        Returns:
            AnalyzerConfig instance
        """
        defaults = cls()
        thresholds = options.get("thresholds") or {}
        return cls(
            include_tests=bool(options.get("includeTests", defaults.include_tests)),
            include_node_modules=bool(
                options.get("includeNodeModules", defaults.include_node_modules)
            ),
            max_file_size=int(options.get("maxFileSize", defaults.max_file_size)),
            timeout_ms=int(options.get("timeout", defaults.timeout_ms)),
            max_concurrency=int(options.get("maxConcurrency", defaults.max_concurrency)),
            ignore_patterns=list(options.get("ignorePatterns") or []),
            use_gitignore=bool(options.get("useGitignore", defaults.use_gitignore)),
            cyclomatic=CyclomaticConfig(
                count_case_statements=bool(options.get("countCaseStatements", True)),
                count_logical_operators=bool(options.get("countLogicalOperators", True)),
                count_ternary=bool(options.get("countTernary", True)),
            ),
            thresholds=ComplexityThresholds(
                low=int(thresholds.get("low", 5)),
                medium=int(thresholds.get("medium", 10)),
                high=int(thresholds.get("high", 20)),
            ),
        )
