"""
Variant generation: probe the source, name the output, and crop-to-fill resize
it on a cache miss.

Generated files are published with a temp file and os.replace(), so a file that
exists under its final name is always complete. Two renders producing the same
name write identical bytes, so the last rename winning is harmless.
"""

import logging
import os
import posixpath
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageOps

from .errors import GenerationError, SourceUnavailableError
from .geometry import resolve, round_px
from .naming import derive_name, read_source
from .presets import VariantRequest

log = logging.getLogger(__name__)

JPEG_QUALITY = 85
RGB_ONLY_FORMATS = {"JPEG"}


@dataclass(frozen=True)
class GeneratedVariant:
    variant_key: str
    media: Optional[str]
    output_relative_path: str
    resolved_width: Optional[int] = None
    resolved_height: Optional[int] = None
    declared_width: Optional[float] = None
    declared_height: Optional[float] = None

    @property
    def skipped(self) -> bool:
        return not self.output_relative_path


# ---------- Image helpers ----------

def read_size(path: Path) -> Tuple[int, int]:
    """Pixel size from the image header; Pillow does not decode pixel data here."""
    try:
        with Image.open(path) as im:
            return im.size
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise GenerationError(f"could not read size of {path}: {e}") from e


def _save_kwargs(fmt: str) -> dict:
    if fmt == "JPEG":
        return {"quality": JPEG_QUALITY, "optimize": True}
    if fmt == "WEBP":
        return {"quality": 80, "method": 6}
    return {}


def crop_to_fill(src: Path, dst: Path, width: int, height: int) -> None:
    """
    Scale src until it covers width x height, crop the centre, drop metadata,
    and publish the result at dst.
    """
    tmp_name = None
    try:
        with Image.open(src) as im:
            fmt = im.format or ""
            out = ImageOps.fit(im, (width, height), method=Image.LANCZOS, centering=(0.5, 0.5))
        out.info.clear()
        save_fmt = Image.registered_extensions().get(dst.suffix.lower(), fmt)
        if save_fmt in RGB_ONLY_FORMATS and out.mode not in ("RGB", "L", "CMYK"):
            out = out.convert("RGB")

        fd, tmp_name = tempfile.mkstemp(dir=dst.parent, prefix=f".{dst.stem}.", suffix=".tmp")
        with os.fdopen(fd, "wb") as f:
            out.save(f, format=save_fmt, **_save_kwargs(save_fmt))
        os.replace(tmp_name, dst)
        tmp_name = None
    except (OSError, ValueError, KeyError, Image.DecompressionBombError) as e:
        raise GenerationError(f"could not generate {dst.name}: {e}") from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass


def public_path(*parts: str) -> str:
    """Join URL path parts like the site root expects: '/generated/img/a.jpg'."""
    segments = [p.strip("/") for p in parts if p and p.strip("/")]
    return posixpath.normpath("/" + "/".join(segments))


# ---------- Generation ----------

def generate(
    request: VariantRequest,
    source_root: Path,
    dest_root: Path,
    public_root: str = "",
) -> GeneratedVariant:
    """
    Resolve the file for one variant request.

    source_root holds the source images, dest_root is where generated files
    live on disk, and public_root is the URL path of dest_root on the site
    (baseurl + output directory). Missing or broken sources give a variant with
    an empty path; the rest of the render carries on.
    """
    # Leading slashes mean site-root relative, never filesystem absolute
    rel = Path(request.source_image_path.lstrip("/"))
    src = Path(source_root) / rel
    skipped = GeneratedVariant(
        request.key, request.media, "",
        declared_width=request.target_width, declared_height=request.target_height,
    )

    try:
        data = read_source(src)
    except SourceUnavailableError:
        log.warning("source image %s is missing.", request.source_image_path)
        return skipped

    try:
        orig_width, orig_height = read_size(src)
    except GenerationError as e:
        log.warning("%s", e)
        return skipped

    width, height, undersized = resolve(orig_width, orig_height, request.target_width, request.target_height)
    out_width, out_height = round_px(width), round_px(height)

    ext = rel.suffix
    name = derive_name(data, width, height, rel.stem, ext)
    image_dir = rel.parent.as_posix()
    dest_dir = Path(dest_root) / image_dir
    dest_file = dest_dir / name

    if dest_file.exists():
        log.debug("Cache hit %s", dest_file)
    else:
        if undersized:
            log.warning(
                "%s is smaller than the requested output file. It will be resized without upscaling.",
                request.source_image_path,
            )
        dest_dir.mkdir(parents=True, exist_ok=True)
        log.info("Generating %s", name)
        try:
            crop_to_fill(src, dest_file, out_width, out_height)
        except GenerationError as e:
            log.warning("%s", e)
            return skipped

    return GeneratedVariant(
        variant_key=request.key,
        media=request.media,
        output_relative_path=public_path(public_root, image_dir, name),
        resolved_width=out_width,
        resolved_height=out_height,
        declared_width=request.target_width,
        declared_height=request.target_height,
    )
