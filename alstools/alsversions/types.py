"""
Immutable data types for alsversions operations.

All types are frozen dataclasses to enforce immutability.
Operations return Result types for explicit error handling.
"""

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Tuple, Optional


class AlsError(Enum):
    """Error types for alsversions operations."""
    FILE_NOT_FOUND = auto()
    NOT_A_FILE = auto()
    CORRUPT_ARCHIVE = auto()
    WRITE_FAILED = auto()
    VCS_FAILED = auto()
    VCS_NOT_FOUND = auto()


class FileState(Enum):
    """Physical state of a tracked project file."""
    COMPRESSED = auto()
    DECOMPRESSED = auto()

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class TrackedFile:
    """A project file carrying the tracked extension."""
    path: Path
    state: FileState

    @property
    def is_compressed(self) -> bool:
        return self.state == FileState.COMPRESSED


@dataclass(frozen=True)
class CompressResult:
    """
    Result of compressing a project file.

    When the file was already gzip data nothing is written and
    changed is False.
    """
    source_path: Path
    output_path: Path
    changed: bool
    original_size: int
    compressed_size: int

    @property
    def compression_ratio(self) -> float:
        """Compute compression ratio (1.0 = no compression)."""
        if self.original_size == 0:
            return 1.0
        return self.compressed_size / self.original_size


@dataclass(frozen=True)
class DecompressResult:
    """Result of decompressing a project file in place."""
    path: Path
    changed: bool
    compressed_size: int
    decompressed_size: int


@dataclass(frozen=True)
class CommitResult:
    """
    Outcome of staging and committing the project folder.

    removed holds the deleted files that were taken out of the index,
    changes the short status lines seen before staging.
    """
    removed: Tuple[str, ...]
    changes: Tuple[str, ...]
    committed: bool
    message: Optional[str]


@dataclass(frozen=True)
class UpdateResult:
    """
    Result of setting up or updating the repository.

    commit is None when setup was skipped because a repository
    already existed.
    """
    initialized: bool
    decompressed: Tuple[Path, ...]
    commit: Optional[CommitResult]


@dataclass(frozen=True)
class MergeResult:
    """Result of merging a branch into the master branch."""
    branch: str
    merged: bool
    previous_branch: Optional[str]
    checked_out: bool
    commit: Optional[CommitResult]


@dataclass(frozen=True)
class Ok:
    """Success result wrapper."""
    value: object


@dataclass(frozen=True)
class Err:
    """Error result wrapper."""
    error: AlsError
    message: str
