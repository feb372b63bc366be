"""Image reference normalization and inlining.

Every ``<img src>`` in a fragment is first made independently resolvable
(``file://`` URLs for local paths) and then replaced by a base64 ``data:``
URL so the rendered document carries no external references.
"""

from __future__ import annotations

import base64
import html
import os
import re
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path, PureWindowsPath
from urllib.parse import unquote, urlparse

import httpx

IMG_SRC_RE = re.compile(r"(<img\b[^>]*\bsrc\s*=\s*)([\"'])((?:(?!\2).)+)(\2)", re.IGNORECASE)
ABSOLUTE_SCHEME_RE = re.compile(r"^(https?:|data:|file:|#|blob:)", re.IGNORECASE)
NEVER_FETCH_RE = re.compile(r"^(data:|blob:|#)", re.IGNORECASE)
WINDOWS_DRIVE_RE = re.compile(r"^[a-zA-Z]:[\\/]")

DEFAULT_MIME = "application/octet-stream"
MIME_BY_EXTENSION: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".bmp": "image/bmp",
}


class AssetKind(str, Enum):
    REMOTE = "remote"
    DATA = "data"
    FILE_URL = "file-url"
    ABSOLUTE_PATH = "absolute-path"
    RELATIVE_PATH = "relative-path"


def classify_src(src: str) -> AssetKind:
    lowered = src.lower()
    if lowered.startswith(("http:", "https:")):
        return AssetKind.REMOTE
    if lowered.startswith(("data:", "blob:", "#")):
        return AssetKind.DATA
    if lowered.startswith("file:"):
        return AssetKind.FILE_URL
    if WINDOWS_DRIVE_RE.match(src) or os.path.isabs(src):
        return AssetKind.ABSOLUTE_PATH
    return AssetKind.RELATIVE_PATH


def normalize_image_src(src: str, basedir: Path) -> str:
    if not src or ABSOLUTE_SCHEME_RE.match(src):
        return src
    if WINDOWS_DRIVE_RE.match(src):
        return PureWindowsPath(src).as_uri()
    local = os.path.abspath(os.path.join(basedir, unquote(html.unescape(src))))
    return Path(local).as_uri()


def rewrite_image_references(fragment: str, basedir: Path) -> str:
    """Turn every image ``src`` into an absolute URL."""

    def _replace(match: re.Match[str]) -> str:
        prefix, quote, src, closing = match.groups()
        return f"{prefix}{quote}{normalize_image_src(src, basedir)}{closing}"

    return IMG_SRC_RE.sub(_replace, fragment)


def mime_from_path(path: Path) -> str:
    return MIME_BY_EXTENSION.get(path.suffix.lower(), DEFAULT_MIME)


def file_url_to_path(url: str) -> Path:
    local = unquote(urlparse(url).path)
    if re.match(r"^/[a-zA-Z]:/", local):
        local = local[1:]
    return Path(local)


def _local_path(src: str, basedir: Path) -> Path:
    if src.lower().startswith("file:"):
        return file_url_to_path(src)
    path = Path(src)
    return path if path.is_absolute() else basedir / path


def _to_data_url(mime: str, payload: bytes) -> str:
    return f"data:{mime};base64,{base64.b64encode(payload).decode('ascii')}"


def fetch_as_data_url(src: str, basedir: Path, client: httpx.Client) -> str | None:
    """Load *src* and return it as a data URL, or ``None`` when it cannot be read."""

    if classify_src(src) is AssetKind.REMOTE:
        try:
            response = client.get(src)
        except (httpx.HTTPError, httpx.InvalidURL):
            return None
        if not response.is_success:
            return None
        mime = response.headers.get("content-type", "").split(";")[0].strip() or DEFAULT_MIME
        return _to_data_url(mime, response.content)

    path = _local_path(src, basedir)
    try:
        payload = path.read_bytes()
    except OSError:
        return None
    return _to_data_url(mime_from_path(path), payload)


def inline_images(
    fragment: str,
    basedir: Path,
    *,
    client: httpx.Client | None = None,
    timeout: float = 10.0,
    max_workers: int = 4,
    warnings: list[str] | None = None,
) -> str:
    """Replace every fetchable image ``src`` with a base64 data URL.

    Distinct sources are fetched concurrently. A source that cannot be
    fetched keeps its current value and is reported in *warnings* as
    ``IMAGE_UNRESOLVED:<src>``.
    """

    # keys are raw attribute text; fetches use the entity-decoded URL
    sources: dict[str, str] = {}
    for match in IMG_SRC_RE.finditer(fragment):
        raw = match.group(3)
        decoded = html.unescape(raw)
        if decoded and not NEVER_FETCH_RE.match(decoded):
            sources.setdefault(raw, decoded)
    if not sources:
        return fragment

    owned = client is None
    http = client or httpx.Client(timeout=timeout, follow_redirects=True)
    try:
        with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
            fetched = executor.map(lambda src: fetch_as_data_url(src, basedir, http), sources.values())
            results = dict(zip(sources, fetched))
    finally:
        if owned:
            http.close()

    replacements = {src: data_url for src, data_url in results.items() if data_url is not None}
    if warnings is not None:
        warnings.extend(f"IMAGE_UNRESOLVED:{sources[src]}" for src, data_url in results.items() if data_url is None)

    def _replace(match: re.Match[str]) -> str:
        prefix, quote, src, closing = match.groups()
        return f"{prefix}{quote}{replacements.get(src, src)}{closing}"

    return IMG_SRC_RE.sub(_replace, fragment)


__all__ = [
    "AssetKind",
    "classify_src",
    "fetch_as_data_url",
    "inline_images",
    "normalize_image_src",
    "rewrite_image_references",
]
