"""Responsive, content-addressed image variants for {% picture %} tags."""

from .errors import (
    ConfigurationError,
    GenerationError,
    InvalidOverrideError,
    MissingDimensionError,
    PictureTagError,
    SourceNotFoundError,
    SourceUnavailableError,
    TagSyntaxError,
    UnknownPresetError,
    UnknownSourceError,
)
from .geometry import resolve
from .naming import derive_name
from .presets import Preset, SourceSpec, VariantRequest, expand, preset_from_config
from .generator import GeneratedVariant, generate
from .render import RenderResult, render_preset

__version__ = "0.1.0"
