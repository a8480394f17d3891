"""
Ableton Live project management for git workflows.

.als files are gzip-compressed XML documents. This module keeps them
decompressed in the working tree so git can diff and merge them, and
recompresses them on request.
"""

from alstools.alsversions.types import (
    AlsError,
    FileState,
    TrackedFile,
    CompressResult,
    DecompressResult,
    CommitResult,
    UpdateResult,
    MergeResult,
)
from alstools.alsversions.config import AlsConfig
from alstools.alsversions.compression import GzipTool
from alstools.alsversions.vcs import GitClient, GitCommandError
from alstools.alsversions.project import Project

__all__ = [
    "AlsError",
    "FileState",
    "TrackedFile",
    "CompressResult",
    "DecompressResult",
    "CommitResult",
    "UpdateResult",
    "MergeResult",
    "AlsConfig",
    "GzipTool",
    "GitClient",
    "GitCommandError",
    "Project",
]
