from __future__ import annotations

import hashlib
import os
import re
import tempfile
import time
from pathlib import Path


DOWNLOAD_NAME_RE = re.compile(r"[^A-Za-z0-9_-]+")


def download_filename(title: str, extension: str = ".pdf") -> str:
    """File name offered for a rendered download, matching the preview page's naming."""

    stem = DOWNLOAD_NAME_RE.sub("_", title.strip() or "document")
    return f"{stem}{extension}"


def generate_run_id(prefix: str = "run") -> str:
    epoch_ms = int(time.time() * 1000)
    random_bits = hashlib.sha256(os.urandom(16)).hexdigest()[:8]
    return f"{prefix}-{epoch_ms}-{random_bits}"


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write *data* through a sibling temp file; the temp file never outlives a failure."""

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile("wb", delete=False, dir=path.parent, suffix=".part")
    try:
        with tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp.name, path)
    except BaseException:
        Path(tmp.name).unlink(missing_ok=True)
        raise


def default_output_path(source: Path) -> Path:
    return source.with_name(f"{source.stem}.pdf")
