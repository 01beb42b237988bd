"""
Whole-file read and all-or-nothing write helpers.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
import tempfile
from pathlib import Path

from xml_magic.errors import InputError, OutputError

logger = logging.getLogger(__name__)


def read_source(path: Path) -> bytes:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise InputError(path, e) from e
    logger.info("read %s (%d bytes)", path, len(data))
    return data


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_atomic(path: Path, data: bytes) -> None:
    """
    Write *data* to *path* through a temp file in the same directory.

    The target only changes once the temp file is complete and synced, so an
    interrupted write never leaves a truncated document behind.
    """
    target = path.resolve()  # keep symlinks pointing at the rewritten file
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            prefix=f".{path.name}.", suffix=".tmp", dir=target.parent, delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        if target.exists():
            shutil.copymode(target, tmp_name)
        else:
            os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, target)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise OutputError(path, e) from e
    logger.info("wrote %s (%d bytes)", path, len(data))


def write_stdout(data: bytes) -> None:
    out = sys.stdout
    out.flush()
    out.buffer.write(data)
    out.buffer.flush()
