"""
Drives one render: validate the preset and overrides, expand, generate every
variant in order.

Everything that can make the render fail outright is checked before the first
source file is opened.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, NamedTuple, Optional, Sequence, Tuple

from . import generator
from .config import SiteSettings
from .errors import InvalidOverrideError
from .generator import GeneratedVariant
from .presets import Preset, check_dimensions, check_overrides, expand

log = logging.getLogger(__name__)


class SourceEntry(NamedTuple):
    media: Optional[str]
    output_path: str
    width: Optional[float]
    height: Optional[float]


@dataclass
class RenderResult:
    variants: List[GeneratedVariant]
    default_key: str
    keep_files: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def default(self) -> Optional[GeneratedVariant]:
        for v in self.variants:
            if v.variant_key == self.default_key:
                return v
        return None

    @property
    def default_path(self) -> str:
        v = self.default
        return v.output_relative_path if v else ""

    def is_default(self, variant: GeneratedVariant) -> bool:
        return variant.variant_key == self.default_key

    def entries(self) -> List[SourceEntry]:
        """Ordered (media, path, width, height) for every variant that was produced."""
        return [
            SourceEntry(
                None if self.is_default(v) else v.media,
                v.output_relative_path,
                v.declared_width,
                v.declared_height,
            )
            for v in self.variants
            if not v.skipped
        ]


def render_preset(
    preset: Preset,
    primary_image_path: str,
    per_source_overrides: Optional[Mapping[str, str]],
    source_root: Path,
    dest_root: Path,
    public_root: str = "",
    density_multipliers: Optional[Sequence[float]] = None,
) -> RenderResult:
    overrides = dict(per_source_overrides or {})
    check_overrides(preset, overrides, error=InvalidOverrideError)
    check_dimensions(preset)

    expansion = expand(preset, primary_image_path, overrides, density_multipliers)
    log.debug("Preset %s expanded to %s", preset.name, expansion.ordered_keys)

    variants = [
        generator.generate(request, source_root, dest_root, public_root)
        for request in expansion
    ]
    return RenderResult(variants=variants, default_key=preset.default_key)


def render(
    site: SiteSettings,
    preset_name: Optional[str],
    primary_image_path: str,
    per_source_overrides: Optional[Mapping[str, str]] = None,
) -> RenderResult:
    """
    Render a preset by name against the site's configured directories.

    The result lists the picture output directory in keep_files; the caller
    decides how to protect it from any cleanup of the destination.
    """
    preset = site.picture.preset(preset_name)
    result = render_preset(
        preset,
        primary_image_path,
        per_source_overrides,
        source_root=site.image_source_root,
        dest_root=site.output_root,
        public_root=site.public_root,
    )
    result.keep_files = (site.picture.output,)
    return result
