"""Filesystem abstraction used by the analyzer and directory discovery."""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class FileStat:
    size: int
    mtime: float


@dataclass(frozen=True)
class DirEntry:
    name: str
    path: str
    is_dir: bool
    is_file: bool


class FileSystem(ABC):
    """Read-only view of a filesystem.

    Implementations raise FileNotFoundError for missing paths and other
    OSError subclasses for anything unreadable; the analyzer maps those to
    NOT_FOUND and UNREADABLE results.
    """

    @abstractmethod
    def read_bytes(self, path: PathLike) -> bytes:
        """Read a file's full content."""

    @abstractmethod
    def stat(self, path: PathLike) -> FileStat:
        """Size and modification time of a file."""

    @abstractmethod
    def list_dir(self, path: PathLike) -> List[DirEntry]:
        """Entries of a directory, in no particular order."""


class LocalFileSystem(FileSystem):
    """FileSystem backed by the local disk."""

    def read_bytes(self, path: PathLike) -> bytes:
        return Path(path).read_bytes()

    def stat(self, path: PathLike) -> FileStat:
        result = Path(path).stat()
        return FileStat(size=result.st_size, mtime=result.st_mtime)

    def list_dir(self, path: PathLike) -> List[DirEntry]:
        entries = []
        with os.scandir(path) as iterator:
            for entry in iterator:
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                    is_file = entry.is_file()
                except OSError as e:
                    logger.debug(f"Skipping unreadable entry {entry.path}: {e}")
                    continue
                entries.append(
                    DirEntry(name=entry.name, path=entry.path, is_dir=is_dir, is_file=is_file)
                )
        return entries
