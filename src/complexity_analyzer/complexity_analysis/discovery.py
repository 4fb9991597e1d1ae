"""Source file discovery for directory analysis.

Walks a directory tree and keeps files a registered scanner can handle,
skipping VCS metadata, build output, dependencies and, unless configured
otherwise, tests. Patterns from the root ``.gitignore`` and from
``AnalyzerConfig.ignore_patterns`` use gitignore syntax.
"""

import logging
import re
from pathlib import PurePath
from typing import Iterable, List, Optional

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern

from ..config import AnalyzerConfig
from .base_analyzer import ScannerRegistry
from .filesystem import FileSystem, LocalFileSystem, PathLike

logger = logging.getLogger(__name__)

SKIP_DIRECTORIES = frozenset({
    ".git", ".svn", ".hg",
    "dist", "build", "target", "bin", "obj",
    ".idea", ".vscode", "__pycache__", ".pytest_cache",
})

TEST_DIRECTORIES = frozenset({
    "test", "tests", "spec", "specs", "__tests__", "__test__", "testing",
})

_TEST_FILE = re.compile(
    r"(?:^test_|_test\.|\.test\.|\.spec\.|^test\.|Tests?\.(?:java|cs|cpp|cc|cxx)$)"
)


def build_ignore_spec(patterns: Iterable[str]) -> Optional[PathSpec]:
    """Compile gitignore-style patterns, skipping blanks and comments."""
    lines = [line.strip() for line in patterns]
    lines = [line for line in lines if line and not line.startswith("#")]
    if not lines:
        return None
    return PathSpec.from_lines(GitWildMatchPattern, lines)


def load_gitignore(root: PathLike, filesystem: FileSystem) -> List[str]:
    """Read the patterns of ``root/.gitignore``, empty when there is none."""
    gitignore_path = str(PurePath(root) / ".gitignore")
    try:
        data = filesystem.read_bytes(gitignore_path)
    except FileNotFoundError:
        logger.debug(f"No .gitignore file found at {gitignore_path}")
        return []
    except OSError as e:
        logger.warning(f"Failed to load .gitignore: {e}")
        return []
    return data.decode("utf-8", errors="replace").splitlines()


class FileFilter:
    """Decides which directories to descend into and which files to analyze."""

    def __init__(
        self,
        config: AnalyzerConfig,
        registry: ScannerRegistry,
        ignore_spec: Optional[PathSpec] = None,
    ):
        self.config = config
        self.registry = registry
        self.ignore_spec = ignore_spec

    def is_ignored(self, relative_path: str, is_dir: bool = False) -> bool:
        """Match a root-relative POSIX path against the ignore patterns."""
        if self.ignore_spec is None:
            return False
        if is_dir:
            relative_path += "/"
        return self.ignore_spec.match_file(relative_path)

    def should_skip_directory(self, name: str) -> bool:
        if name == "node_modules":
            return not self.config.include_node_modules
        if not self.config.include_tests and name.lower() in TEST_DIRECTORIES:
            return True
        return name in SKIP_DIRECTORIES or name.startswith(".")

    def is_test_file(self, name: str) -> bool:
        return bool(_TEST_FILE.search(name))

    def should_analyze_file(self, path: PathLike) -> bool:
        pure = PurePath(path)
        if not pure.suffix or self.registry.get_by_extension(pure.suffix) is None:
            return False
        if not self.config.include_tests and self.is_test_file(pure.name):
            return False
        return True


def find_source_files(
    root: PathLike,
    config: AnalyzerConfig,
    registry: ScannerRegistry,
    filesystem: Optional[FileSystem] = None,
) -> List[str]:
    """Collect analyzable files under ``root``.

    Entries are visited in name order per directory; callers should not
    rely on any particular overall order.

    Args:
        root: Directory to walk
        config: Analyzer configuration with the skip policy
        registry: Registry deciding which extensions are supported
        filesystem: Filesystem to read, local disk by default

    Returns:
        List of file paths
    """
    filesystem = filesystem or LocalFileSystem()
    patterns = list(config.ignore_patterns)
    if config.use_gitignore:
        patterns.extend(load_gitignore(root, filesystem))
    file_filter = FileFilter(config, registry, build_ignore_spec(patterns))

    files: List[str] = []
    # (directory, its path relative to root)
    pending = [(str(root), "")]

    while pending:
        directory, prefix = pending.pop()
        try:
            entries = sorted(filesystem.list_dir(directory), key=lambda entry: entry.name)
        except OSError as e:
            logger.warning(f"Cannot list directory {directory}: {e}")
            continue

        subdirectories = []
        for entry in entries:
            relative_path = prefix + entry.name
            if entry.is_dir:
                if file_filter.should_skip_directory(entry.name) or file_filter.is_ignored(
                    relative_path, is_dir=True
                ):
                    logger.debug(f"Skipping directory {entry.path}")
                    continue
                subdirectories.append((entry.path, relative_path + "/"))
            elif (
                entry.is_file
                and file_filter.should_analyze_file(entry.path)
                and not file_filter.is_ignored(relative_path)
            ):
                files.append(entry.path)

        # Reversed so the stack visits subdirectories in name order
        pending.extend(reversed(subdirectories))

    logger.info(f"Found {len(files)} source files under {root}")
    return files
