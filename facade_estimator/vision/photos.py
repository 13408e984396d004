"""Load facade photographs from disk or over HTTP."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from pathlib import Path

import httpx

from facade_estimator.config import get_settings

MEDIA_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
}


@dataclass(frozen=True)
class Photo:
    """Raw bytes of one photograph ready for the vision model."""
    source: str
    data: bytes
    media_type: str

    def to_content_block(self) -> dict:
        return {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": self.media_type,
                "data": base64.standard_b64encode(self.data).decode("utf-8"),
            },
        }


def is_url(source: str | Path) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


async def load_photo(source: str | Path, timeout: float | None = None) -> Photo:
    """Read a photograph from a local path or download it from a URL.

    Raises:
        FileNotFoundError: If a local path does not exist.
        httpx.HTTPError: On download failures.
    """
    if is_url(source):
        return await _download(str(source), timeout)

    path = Path(source)
    if not path.is_file():
        raise FileNotFoundError(f"Photo not found: {path}")
    media_type = MEDIA_TYPES.get(path.suffix.lower(), "image/jpeg")
    return Photo(source=str(path), data=path.read_bytes(), media_type=media_type)


async def _download(url: str, timeout: float | None) -> Photo:
    timeout = timeout or get_settings().photo_download_timeout
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        resp = await client.get(url)
        resp.raise_for_status()

    content_type = resp.headers.get("content-type", "").split(";")[0].strip()
    if not content_type.startswith("image/"):
        suffix = Path(httpx.URL(url).path).suffix.lower()
        content_type = MEDIA_TYPES.get(suffix, "image/jpeg")
    return Photo(source=url, data=resp.content, media_type=content_type)
