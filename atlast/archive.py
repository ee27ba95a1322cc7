from __future__ import annotations

import io
import logging
import os
import tempfile
import zipfile
from pathlib import Path
from typing import Tuple

from .errors import ArchiveReadError, ArchiveWriteError

IMAGE_ENTRY = "atlas.png"
DATA_ENTRY = "atlas.data"

# Earliest timestamp a zip entry can carry; pinned so archives are reproducible.
_ENTRY_DATE = (1980, 1, 1, 0, 0, 0)


def _entry(name: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=_ENTRY_DATE)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.external_attr = 0o644 << 16
    return info


def build_archive(png_bytes: bytes, data_bytes: bytes) -> bytes:
    """Bundle the atlas image and its metadata into an in-memory zip."""
    with io.BytesIO() as buf:
        with zipfile.ZipFile(buf, "w") as zf:
            zf.writestr(_entry(IMAGE_ENTRY), png_bytes)
            zf.writestr(_entry(DATA_ENTRY), data_bytes)
        return buf.getvalue()


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def write_archive(path: Path, payload: bytes) -> None:
    """
    Write ``payload`` to ``path`` in a single finalize step.

    The bytes go to a temporary file next to the destination which then
    replaces it, so a failed write never leaves a partial archive behind.
    """
    path = Path(path)
    directory = path.parent
    tmp_name = None
    try:
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
        # mkstemp creates 0600; give the archive the usual umask-based mode
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise ArchiveWriteError(f"Cannot write archive {path}: {e}") from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.remove(tmp_name)

    logging.info(f"Wrote {len(payload):,} bytes to {path}")


def read_archive(path: Path) -> Tuple[bytes, bytes]:
    """Return the (atlas.png, atlas.data) payloads of an existing archive."""
    try:
        with zipfile.ZipFile(path) as zf:
            names = set(zf.namelist())
            missing = [n for n in (IMAGE_ENTRY, DATA_ENTRY) if n not in names]
            if missing:
                raise ArchiveReadError(f"{path} is missing {', '.join(missing)}")
            return zf.read(IMAGE_ENTRY), zf.read(DATA_ENTRY)
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveReadError(f"Cannot read archive {path}: {e}") from e
