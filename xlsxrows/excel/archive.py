from __future__ import annotations

import logging
import shutil
import zipfile
from pathlib import Path

from .errors import ExtractionError

"""Filesystem primitives for the extraction lifecycle: unzip and ``rm -rf``."""

__all__ = [
    "extract_archive",
    "delete_tree",
]

logger = logging.getLogger(__name__)


def extract_archive(archive_path: Path, dest_dir: Path) -> list[str]:
    """Unpack ``archive_path`` into ``dest_dir`` and return the member names.

    Raises:
        ExtractionError: archive is not a ZIP file, uses an unsupported
            feature (encryption, compression method, ZIP64 limits) or cannot
            be written out
    """
    try:
        with zipfile.ZipFile(archive_path) as zf:
            names = zf.namelist()
            zf.extractall(dest_dir)
    except (
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        NotImplementedError,
        RuntimeError,
        ValueError,
        OSError,
    ) as e:
        raise ExtractionError(f"Failed to unzip file: {e}") from e
    logger.debug(f"extracted {len(names)} members from {archive_path} into {dest_dir}")
    return names


def delete_tree(path: Path) -> bool:
    """Recursively delete ``path``. Returns False if anything could not be removed.

    A path that does not exist counts as deleted.
    """
    if not path.exists():
        return True
    failures: list[str] = []

    def _on_error(func, failed_path, exc) -> None:  # pragma: no cover (platform dependent)
        failures.append(f"{failed_path}: {exc}")

    if path.is_dir():
        shutil.rmtree(path, onexc=_on_error)
    else:
        try:
            path.unlink()
        except OSError as e:
            failures.append(f"{path}: {e}")

    for failure in failures:
        logger.warning(f"cleanup: could not remove {failure}")
    return not failures
