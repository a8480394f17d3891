"""
Compress and decompress Ableton Live project files.

.als files are gzip streams wrapping an XML document. Keeping them
decompressed in the working tree lets git diff and merge the XML;
compressing restores the form Live writes itself.

Both directions write to a sibling temporary file and replace the
target only once the new content is complete.
"""

import gzip
import os
import shutil
import tempfile
import zlib
from pathlib import Path
from typing import Protocol, Union

from alstools.alsversions.log import logger
from alstools.alsversions.types import (
    CompressResult,
    DecompressResult,
    FileState,
    Ok,
    Err,
    AlsError,
)


GZIP_MAGIC = b"\x1f\x8b"


class CompressionTool(Protocol):
    """What a project needs from a compression backend."""

    def file_state(self, path: Path) -> Union[Ok, Err]: ...

    def compress(self, path: Path) -> Union[Ok, Err]: ...

    def decompress(self, path: Path) -> Union[Ok, Err]: ...


def is_gzip_file(path: Path) -> bool:
    """Check the gzip magic bytes at the start of a file."""
    with open(path, "rb") as fh:
        return fh.read(len(GZIP_MAGIC)) == GZIP_MAGIC


def find_tracked_files(directory: Path, extension: str) -> list[Path]:
    """List files directly in directory that carry the tracked extension."""
    return sorted(
        path for path in Path(directory).iterdir()
        if path.is_file() and path.suffix == extension
    )


def _check_file(path: Path) -> Union[Err, None]:
    if not path.exists():
        return Err(AlsError.FILE_NOT_FOUND, f"File not found: {path}")
    if not path.is_file():
        return Err(AlsError.NOT_A_FILE, f"Not a regular file: {path}")
    return None


def _temporary_sibling(path: Path, suffix: str) -> Path:
    fd, name = tempfile.mkstemp(
        prefix=f".{path.stem}-", suffix=suffix, dir=path.parent
    )
    os.close(fd)
    return Path(name)


class GzipTool:
    """
    gzip backend for project files.

    Args:
        extension: Suffix compressed files are written under
        level: gzip compression level (9 matches `gzip -9`)
    """

    def __init__(self, extension: str = ".als", level: int = 9):
        self.extension = extension
        self.level = level

    def file_state(self, path: Path) -> Union[Ok, Err]:
        """
        Report whether a file is currently gzip data.

        Returns:
            Ok(FileState) on success, Err if the file is missing
        """
        path = Path(path)
        problem = _check_file(path)
        if problem is not None:
            return problem
        try:
            compressed = is_gzip_file(path)
        except OSError as e:
            return Err(AlsError.FILE_NOT_FOUND, f"Cannot read {path}: {e}")
        return Ok(FileState.COMPRESSED if compressed else FileState.DECOMPRESSED)

    def compress(self, path: Path) -> Union[Ok, Err]:
        """
        gzip a file under the tracked extension.

        The last suffix of the name is replaced by the extension, so
        song.als is rewritten in place and song.xml becomes song.als.
        A file that is already gzip data is left untouched.

        Args:
            path: File to compress

        Returns:
            Ok(CompressResult) on success, Err on failure
        """
        path = Path(path)
        state = self.file_state(path)
        if isinstance(state, Err):
            return state

        size = path.stat().st_size
        if state.value == FileState.COMPRESSED:
            return Ok(CompressResult(
                source_path=path,
                output_path=path,
                changed=False,
                original_size=size,
                compressed_size=size,
            ))

        output_path = path.with_suffix(self.extension)
        if output_path != path and output_path.exists():
            return Err(AlsError.WRITE_FAILED, f"{output_path} already exists")

        tmp = _temporary_sibling(path, ".gz")
        try:
            with open(path, "rb") as src, open(tmp, "wb") as raw:
                with gzip.GzipFile(
                    filename=path.stem, mode="wb",
                    compresslevel=self.level, fileobj=raw,
                ) as dst:
                    shutil.copyfileobj(src, dst)
            shutil.copymode(path, tmp)
            os.replace(tmp, output_path)
            if output_path != path:
                path.unlink()
        except OSError as e:
            return Err(AlsError.WRITE_FAILED, f"Write failed: {e}")
        finally:
            tmp.unlink(missing_ok=True)

        compressed_size = output_path.stat().st_size
        logger.debug(f"Compressed {path.name}: {size:,} -> {compressed_size:,} bytes")
        return Ok(CompressResult(
            source_path=path,
            output_path=output_path,
            changed=True,
            original_size=size,
            compressed_size=compressed_size,
        ))

    def decompress(self, path: Path) -> Union[Ok, Err]:
        """
        Replace a gzip file with its decompressed content, keeping its name.

        A file that is not gzip data is left untouched.

        Args:
            path: File to decompress

        Returns:
            Ok(DecompressResult) on success, Err on failure
        """
        path = Path(path)
        state = self.file_state(path)
        if isinstance(state, Err):
            return state

        size = path.stat().st_size
        if state.value == FileState.DECOMPRESSED:
            return Ok(DecompressResult(
                path=path, changed=False,
                compressed_size=size, decompressed_size=size,
            ))

        tmp = _temporary_sibling(path, ".decompressed")
        try:
            with gzip.open(path, "rb") as src, open(tmp, "wb") as dst:
                shutil.copyfileobj(src, dst)
            shutil.copymode(path, tmp)
            os.replace(tmp, path)
        except (gzip.BadGzipFile, EOFError, zlib.error) as e:
            return Err(AlsError.CORRUPT_ARCHIVE, f"Corrupt gzip data in {path}: {e}")
        except OSError as e:
            return Err(AlsError.WRITE_FAILED, f"Write failed: {e}")
        finally:
            tmp.unlink(missing_ok=True)

        decompressed_size = path.stat().st_size
        logger.debug(f"Decompressed {path.name}: {size:,} -> {decompressed_size:,} bytes")
        return Ok(DecompressResult(
            path=path, changed=True,
            compressed_size=size, decompressed_size=decompressed_size,
        ))
