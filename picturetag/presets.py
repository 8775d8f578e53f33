"""
Presets and their expansion into ordered variant requests.

A preset is read from configuration once and never changes. Each render asks
expand() for a fresh Expansion that it owns outright, so concurrent renders of
the same preset cannot see each other's image paths.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import InvalidPresetError, MissingDimensionError, UnknownSourceError
from .geometry import round_px

DEFAULT_SOURCE_KEY = "source_default"
DENSITY_KEY = "ppi"
ATTR_KEY = "attr"
CSS_DPI = 96


@dataclass(frozen=True)
class SourceSpec:
    width: Optional[float] = None
    height: Optional[float] = None
    media: Optional[str] = None

    @property
    def has_dimension(self) -> bool:
        return self.width is not None or self.height is not None


@dataclass(frozen=True)
class Preset:
    name: str
    sources: Tuple[Tuple[str, SourceSpec], ...]
    densities: Tuple[float, ...] = ()
    attributes: Tuple[Tuple[str, Optional[str]], ...] = ()
    default_key: str = DEFAULT_SOURCE_KEY

    @property
    def keys(self) -> List[str]:
        return [k for k, _ in self.sources]

    def source(self, key: str) -> SourceSpec:
        for k, spec in self.sources:
            if k == key:
                return spec
        raise KeyError(key)


@dataclass(frozen=True)
class VariantRequest:
    key: str
    source_image_path: str
    target_width: Optional[float] = None
    target_height: Optional[float] = None
    media: Optional[str] = None


@dataclass
class Expansion:
    ordered_keys: List[str]
    requests: Dict[str, VariantRequest] = field(default_factory=dict)

    def __iter__(self):
        return (self.requests[k] for k in self.ordered_keys)

    def __len__(self) -> int:
        return len(self.ordered_keys)


# ---------- Loading ----------

def _positive(value, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise InvalidPresetError(f"{what} must be a positive number, got {value!r}")
    return value


def preset_from_config(name: str, raw: Mapping) -> Preset:
    """
    Build a Preset from its configuration mapping:

      gallery:
        ppi: [1, 1.5, 2]
        attr: {class: gallery}
        source_small: {width: 200, media: "(max-width: 400px)"}
        source_default: {width: 400}

    Dimensions are not required here; expand() rejects sources without any.
    """
    if not isinstance(raw, Mapping):
        raise InvalidPresetError(f"Preset {name} must be a mapping of sources")

    sources: List[Tuple[str, SourceSpec]] = []
    densities: Tuple[float, ...] = ()
    attributes: Tuple[Tuple[str, Optional[str]], ...] = ()

    for key, value in raw.items():
        key = str(key)
        if key == DENSITY_KEY:
            if not isinstance(value, (list, tuple)):
                raise InvalidPresetError(f"Preset {name}: ppi must be a list")
            densities = tuple(_positive(p, f"Preset {name} ppi") for p in value)
        elif key == ATTR_KEY:
            if not isinstance(value, Mapping):
                raise InvalidPresetError(f"Preset {name}: attr must be a mapping")
            attributes = tuple(
                (str(k), None if v is None else str(v)) for k, v in value.items()
            )
        else:
            if not isinstance(value, Mapping):
                raise InvalidPresetError(f"Preset {name}: source {key} must be a mapping")
            width = value.get("width")
            height = value.get("height")
            media = value.get("media")
            sources.append((key, SourceSpec(
                width=None if width is None else _positive(width, f"{name}.{key}.width"),
                height=None if height is None else _positive(height, f"{name}.{key}.height"),
                media=None if media is None else str(media),
            )))

    if not sources:
        raise InvalidPresetError(f"Preset {name} declares no sources")
    if DEFAULT_SOURCE_KEY not in [k for k, _ in sources]:
        raise InvalidPresetError(f"Preset {name} has no {DEFAULT_SOURCE_KEY}")

    return Preset(name=name, sources=tuple(sources), densities=densities, attributes=attributes)


# ---------- Density media queries ----------

def density_key(key: str, density: float) -> str:
    return f"{key}-x{density}"


def density_media(base_media: Optional[str], density: float) -> str:
    # The unqualified branch truncates the dpi value, the qualified one rounds.
    if base_media:
        return (
            f"{base_media} and (-webkit-min-device-pixel-ratio: {density}), "
            f"{base_media} and (min-resolution: {round_px(density * CSS_DPI)}dpi)"
        )
    return (
        f"(-webkit-min-device-pixel-ratio: {density}), "
        f"(min-resolution: {int(density * CSS_DPI)}dpi)"
    )


def _scaled(value: Optional[float], density: float) -> Optional[int]:
    return None if value is None else round_px(value * density)


# ---------- Expansion ----------

def check_overrides(preset: Preset, overrides: Mapping[str, str], error=UnknownSourceError) -> None:
    unknown = set(overrides) - set(preset.keys)
    if unknown:
        raise error(preset.name, unknown)


def check_dimensions(preset: Preset) -> None:
    for key, spec in preset.sources:
        if not spec.has_dimension:
            raise MissingDimensionError(key)


def expand(
    preset: Preset,
    primary_image_path: str,
    per_source_overrides: Optional[Mapping[str, str]] = None,
    density_multipliers: Optional[Sequence[float]] = None,
) -> Expansion:
    """
    Expand a preset into one request per declared source plus one per density
    multiplier other than 1.

    Each base key keeps its declared position; its density variants sit directly
    before it, highest density first:

      source_default-x2, source_default-x1.5, source_default, source_small-x2, source_small
    """
    overrides = dict(per_source_overrides or {})
    check_overrides(preset, overrides)
    check_dimensions(preset)

    if density_multipliers is None:
        density_multipliers = preset.densities
    densities = [p for p in sorted(set(density_multipliers), reverse=True) if p != 1]

    # Plan: each declared key with the cluster of requests that precede it.
    plan: List[Tuple[VariantRequest, List[VariantRequest]]] = []
    for key, spec in preset.sources:
        path = overrides.get(key) or primary_image_path
        base = VariantRequest(
            key=key,
            source_image_path=path,
            target_width=spec.width,
            target_height=spec.height,
            media=spec.media,
        )
        cluster = [
            VariantRequest(
                key=density_key(key, p),
                source_image_path=path,
                target_width=_scaled(spec.width, p),
                target_height=_scaled(spec.height, p),
                media=density_media(spec.media, p),
            )
            for p in densities
        ]
        plan.append((base, cluster))

    expansion = Expansion(ordered_keys=[])
    for base, cluster in plan:
        for request in cluster + [base]:
            expansion.ordered_keys.append(request.key)
            expansion.requests[request.key] = request
    return expansion
