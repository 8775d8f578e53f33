"""Content-addressed names for generated images."""

import hashlib
from pathlib import Path

from .errors import SourceNotFoundError
from .geometry import round_px

DIGEST_CHARS = 6


def digest_bytes(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()[:DIGEST_CHARS]


def read_source(path: Path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise SourceNotFoundError(path) from e


def derive_name(source_file_bytes: bytes, resolved_width: float, resolved_height: float, basename: str, ext: str) -> str:
    """
    "{basename}-{width}by{height}-{digest}{ext}", e.g. "poster-400by200-1a2b3c.jpg".

    Same bytes and same geometry always give the same name, which is what makes
    an existing file a valid cache hit.
    """
    digest = digest_bytes(source_file_bytes)
    return f"{basename}-{round_px(resolved_width)}by{round_px(resolved_height)}-{digest}{ext}"
