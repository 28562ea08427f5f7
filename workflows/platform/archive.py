"""Archive extraction.

Supports zip and tar archives (plain, gzip, xz, bzip2). Member paths are
sanitized: absolute paths, ``..`` components, links and anything resolving
outside the target directory are skipped.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import stat
import tarfile
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from workflows.core.result import Err, Ok, Result

__all__ = ["ArchiveError", "ExtractResult", "extract", "archive_stem", "SUPPORTED_SUFFIXES"]

_TAR_MODES: dict[tuple[str, ...], str] = {
    (".tar.gz", ".tgz"): "r:gz",
    (".tar.xz", ".txz"): "r:xz",
    (".tar.bz2", ".tbz2", ".tbz"): "r:bz2",
    (".tar",): "r:",
}

SUPPORTED_SUFFIXES: tuple[str, ...] = (
    ".zip",
    *(suffix for suffixes in _TAR_MODES for suffix in suffixes),
)


@dataclass(frozen=True, slots=True)
class ArchiveError:
    """Extraction error details."""

    archive: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.archive}"


@dataclass(frozen=True, slots=True)
class ExtractResult:
    """Where files went and how many were written."""

    target: Path
    files_count: int


def archive_stem(archive: Path) -> str:
    """Archive file name without its archive suffix ("a.tar.gz" -> "a")."""
    name = archive.name
    lower = name.lower()
    for suffix in sorted(SUPPORTED_SUFFIXES, key=len, reverse=True):
        if lower.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return archive.stem or name


def _safe_relative_path(member_name: str, strip_components: int) -> Path | None:
    """Return a sanitized relative extraction path, or None if unsafe."""
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None

    parts = PurePosixPath(normalized).parts
    if len(parts) <= strip_components:
        return None

    kept = parts[strip_components:]
    if any(part in {"", ".", ".."} for part in kept):
        return None
    # Drive letters ("C:") from archives built on Windows
    if kept[0].endswith(":"):
        return None

    return Path(*kept)


def _is_within_root(root: Path, target: Path) -> bool:
    try:
        return target.resolve().is_relative_to(root)
    except OSError:
        return False


def extract(
    archive: Path,
    target: Path,
    *,
    strip_components: int = 0,
) -> Result[ExtractResult, ArchiveError]:
    """Extract ``archive`` into ``target``, creating it if needed.

    Existing files in ``target`` are overwritten, others are left alone.
    """
    if strip_components < 0:
        return Err(ArchiveError(archive=archive, message="strip_components must be >= 0"))
    if not archive.is_file():
        return Err(ArchiveError(archive=archive, message="Archive not found"))

    # Path.suffixes is unreliable for names like "tool-1.2.3-linux.zip"
    name = archive.name.lower()
    if name.endswith(".zip"):
        return _extract_zip(archive, target, strip_components)
    for suffixes, mode in _TAR_MODES.items():
        if name.endswith(suffixes):
            return _extract_tar(archive, target, strip_components, mode)
    return Err(
        ArchiveError(archive=archive, message=f"Unsupported archive format: {archive.suffix}")
    )


def _extract_tar(
    archive: Path,
    target: Path,
    strip_components: int,
    mode: str,
) -> Result[ExtractResult, ArchiveError]:
    try:
        target.mkdir(parents=True, exist_ok=True)
        root = target.resolve()
        files_count = 0

        with tarfile.open(archive, mode) as tar:
            for member in tar.getmembers():
                # Regular files only: no dirs, links, devices or fifos
                if not member.isreg():
                    continue

                rel_path = _safe_relative_path(member.name, strip_components)
                if rel_path is None:
                    continue

                full_path = target / rel_path
                if not _is_within_root(root, full_path):
                    continue

                src = tar.extractfile(member)
                if src is None:
                    continue

                full_path.parent.mkdir(parents=True, exist_ok=True)
                with src, open(full_path, "wb") as dst:
                    shutil.copyfileobj(src, dst)

                perms = member.mode & 0o777
                if perms:
                    with contextlib.suppress(OSError):
                        os.chmod(full_path, perms)

                files_count += 1

        return Ok(ExtractResult(target=target, files_count=files_count))

    except tarfile.TarError as e:
        return Err(ArchiveError(archive=archive, message=f"Tar extraction failed: {e}"))
    except OSError as e:
        return Err(ArchiveError(archive=archive, message=f"IO error: {e}"))


def _extract_zip(
    archive: Path,
    target: Path,
    strip_components: int,
) -> Result[ExtractResult, ArchiveError]:
    try:
        target.mkdir(parents=True, exist_ok=True)
        root = target.resolve()
        files_count = 0

        with zipfile.ZipFile(archive, "r") as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue

                rel_path = _safe_relative_path(info.filename, strip_components)
                if rel_path is None:
                    continue

                unix_attrs = info.external_attr >> 16
                if stat.S_ISLNK(unix_attrs):
                    continue

                full_path = target / rel_path
                if not _is_within_root(root, full_path):
                    continue

                full_path.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(full_path, "wb") as dst:
                    shutil.copyfileobj(src, dst)

                perms = unix_attrs & 0o777
                if perms:
                    with contextlib.suppress(OSError):
                        full_path.chmod(perms)

                files_count += 1

        return Ok(ExtractResult(target=target, files_count=files_count))

    except zipfile.BadZipFile as e:
        return Err(ArchiveError(archive=archive, message=f"Invalid zip file: {e}"))
    except OSError as e:
        return Err(ArchiveError(archive=archive, message=f"IO error: {e}"))
