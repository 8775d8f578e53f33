"""Site and picture configuration loading with JSON and YAML support."""

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .errors import ConfigurationError, UnknownPresetError
from .presets import Preset, preset_from_config

log = logging.getLogger(__name__)

MARKUP_MODES = ("picturefill", "picture", "interchange", "img")
DEFAULT_PRESET = "default"


def detect_format(file_path) -> str:
    suffix = Path(file_path).suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path) -> Dict[str, Any]:
    """
    Load a raw site configuration (e.g. _config.yml) as a dictionary.

    Raises FileNotFoundError if the file does not exist and ValueError if the
    format is unsupported or the content is not a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text) if fmt == "json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Invalid {fmt} in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping: {path}")
    log.debug("Loaded %s config from %s", fmt, path)
    return data


@dataclass(frozen=True)
class PictureSettings:
    source: str = "."
    output: str = "generated"
    markup: str = "picturefill"
    presets: Mapping[str, Preset] = field(default_factory=dict)

    def preset(self, name: Optional[str]) -> Preset:
        name = name or DEFAULT_PRESET
        try:
            return self.presets[name]
        except KeyError:
            raise UnknownPresetError(name) from None


@dataclass(frozen=True)
class SiteSettings:
    source: Path
    destination: Path
    url: str = ""
    baseurl: str = ""
    keep_files: Tuple[str, ...] = ()
    picture: PictureSettings = field(default_factory=PictureSettings)

    @property
    def image_source_root(self) -> Path:
        return self.source / self.picture.source

    @property
    def output_root(self) -> Path:
        return self.destination / self.picture.output

    @property
    def public_root(self) -> str:
        return f"{self.baseurl.rstrip('/')}/{self.picture.output.strip('/')}"

    def with_kept_output(self) -> "SiteSettings":
        """Copy whose keep_files protects the generated directory from cleanup."""
        if self.picture.output in self.keep_files:
            return self
        return replace(self, keep_files=self.keep_files + (self.picture.output,))


def picture_from_config(raw: Optional[Mapping]) -> PictureSettings:
    raw = raw or {}
    if not isinstance(raw, Mapping):
        raise ConfigurationError("picture: must be a mapping")

    markup = raw.get("markup") or "picturefill"
    if markup not in MARKUP_MODES:
        raise ConfigurationError(
            f"Unknown picture markup {markup!r}; expected one of {', '.join(MARKUP_MODES)}"
        )

    presets_raw = raw.get("presets") or {}
    if not isinstance(presets_raw, Mapping):
        raise ConfigurationError("picture: presets must be a mapping")
    presets = {str(name): preset_from_config(str(name), spec) for name, spec in presets_raw.items()}

    return PictureSettings(
        source=str(raw.get("source") or "."),
        output=str(raw.get("output") or "generated"),
        markup=markup,
        presets=presets,
    )


def site_from_config(raw: Mapping, root) -> SiteSettings:
    """Site settings from a loaded config; relative paths resolve against root."""
    root = Path(root)
    return SiteSettings(
        source=root / str(raw.get("source") or "."),
        destination=root / str(raw.get("destination") or "_site"),
        url=str(raw.get("url") or ""),
        baseurl=str(raw.get("baseurl") or ""),
        keep_files=tuple(str(f) for f in (raw.get("keep_files") or ())),
        picture=picture_from_config(raw.get("picture")),
    )
