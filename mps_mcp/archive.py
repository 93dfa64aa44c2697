"""Zip archive materialization into a directory tree."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import zipfile
from pathlib import Path

from mps_mcp.errors import ExportError, PathValidationError
from mps_mcp.security.paths import resolve_within

logger = logging.getLogger(__name__)


def _write_temp_archive(data: bytes, output_dir: Path) -> Path:
    fd, tmp_name = tempfile.mkstemp(dir=output_dir, prefix=".export-", suffix=".zip")
    with os.fdopen(fd, "wb") as fh:
        fh.write(data)
    return Path(tmp_name)


def _extract_entries(archive_path: Path, output_dir: Path) -> list[Path]:
    written: list[Path] = []
    with zipfile.ZipFile(archive_path) as archive:
        for info in archive.infolist():
            if info.filename.endswith("/"):
                continue
            target = resolve_within(output_dir, info.filename)
            target.parent.mkdir(parents=True, exist_ok=True)
            with archive.open(info) as src, target.open("wb") as dst:
                shutil.copyfileobj(src, dst)
            written.append(target)
            logger.debug("Extracted %s (%d bytes)", target, info.file_size)
    return written


def extract_archive(data: bytes, output_dir: Path | str) -> list[Path]:
    """Write *data* (a zip archive) under *output_dir* and return the extracted file paths.

    Directory entries are skipped; parents are created as files are written.
    The temporary archive is removed whether extraction succeeds or not.
    Files already extracted before a failure are left in place.

    Raises:
        ExportError: archive unreadable, entry escapes *output_dir*, or write failed.
    """
    root = Path(output_dir).expanduser().resolve()
    try:
        root.mkdir(parents=True, exist_ok=True)
        tmp = _write_temp_archive(data, root)
    except OSError as exc:
        msg = f"Cannot prepare output directory {root}: {exc}"
        raise ExportError(msg) from exc

    try:
        written = _extract_entries(tmp, root)
    except zipfile.BadZipFile as exc:
        msg = f"Export response is not a valid zip archive: {exc}"
        raise ExportError(msg) from exc
    except PathValidationError as exc:
        raise ExportError(str(exc)) from exc
    except OSError as exc:
        msg = f"Extraction into {root} failed: {exc}"
        raise ExportError(msg) from exc
    finally:
        tmp.unlink(missing_ok=True)

    logger.info("Extracted %d files into %s", len(written), root)
    return written
