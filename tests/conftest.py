"""Shared pytest fixtures for all tests."""

import tempfile
import threading
import time
from pathlib import Path

import pytest

from complexity_analyzer.complexity_analysis import create_default_registry
from complexity_analyzer.complexity_analysis.filesystem import DirEntry, FileStat, FileSystem
from complexity_analyzer.config import AnalyzerConfig


class InMemoryFileSystem(FileSystem):
    """FileSystem over a dict of path -> content, with read accounting.

    ``delay`` makes every read sleep so tests can observe concurrency and
    timeouts. Paths in ``unreadable`` stat fine but fail to read.
    """

    def __init__(self, files=None, delay: float = 0.0):
        self.files = {}
        for path, content in (files or {}).items():
            self.add(path, content)
        self.delay = delay
        self.unreadable = set()
        self.reads = []
        self.in_flight = 0
        self.peak_in_flight = 0
        self._lock = threading.Lock()

    def add(self, path: str, content) -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.files[path] = content

    def _is_dir(self, path: str) -> bool:
        prefix = path.rstrip("/") + "/"
        return any(name.startswith(prefix) for name in self.files)

    def stat(self, path) -> FileStat:
        path = str(path)
        if path in self.files:
            return FileStat(size=len(self.files[path]), mtime=0.0)
        if self._is_dir(path):
            return FileStat(size=0, mtime=0.0)
        raise FileNotFoundError(path)

    def read_bytes(self, path) -> bytes:
        path = str(path)
        with self._lock:
            self.reads.append(path)
            self.in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            if path in self.unreadable:
                raise PermissionError(f"Permission denied: {path}")
            if path not in self.files:
                raise FileNotFoundError(path)
            return self.files[path]
        finally:
            with self._lock:
                self.in_flight -= 1

    def list_dir(self, path):
        prefix = str(path).rstrip("/") + "/"
        children = {}
        for name in self.files:
            if not name.startswith(prefix):
                continue
            head, sep, _ = name[len(prefix):].partition("/")
            children[head] = children.get(head, False) or bool(sep)
        if not children:
            raise FileNotFoundError(str(path))
        return [
            DirEntry(name=name, path=prefix + name, is_dir=is_dir, is_file=not is_dir)
            for name, is_dir in children.items()
        ]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config():
    """Default analyzer configuration."""
    return AnalyzerConfig()


@pytest.fixture
def registry():
    """Fresh registry holding the built-in scanners."""
    return create_default_registry()


@pytest.fixture
def memory_fs():
    """Empty in-memory filesystem; tests add files with ``add``."""
    return InMemoryFileSystem()
