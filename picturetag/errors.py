"""
Exceptions raised by picturetag.

Configuration errors are fatal to a render and are raised before any file is
touched. Source and generation errors only ever affect one variant: the
generator logs them and returns an empty path for that variant.
"""


class PictureTagError(Exception):
    pass


# ---------- Fatal ----------

class ConfigurationError(PictureTagError):
    pass


class UnknownPresetError(ConfigurationError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f'Picture Tag can\'t find the "{name}" preset. '
            "Check picture: presets in _config.yml for a list of presets."
        )
        self.name = name


class UnknownSourceError(ConfigurationError):
    def __init__(self, preset: str, keys) -> None:
        listed = ", ".join(sorted(keys))
        super().__init__(
            f"Picture Tag can't find preset source(s) {listed}. "
            f"Check picture: presets: {preset} in _config.yml for a list of sources."
        )
        self.preset = preset
        self.keys = sorted(keys)


class InvalidOverrideError(UnknownSourceError):
    pass


class MissingDimensionError(ConfigurationError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Preset {key} is missing a width or a height")
        self.key = key


class InvalidPresetError(ConfigurationError):
    pass


class TagSyntaxError(PictureTagError):
    def __init__(self, text: str) -> None:
        super().__init__(
            "Picture Tag can't read this tag. Try {% picture [preset] path/to/img.jpg "
            '[source_key: path/to/alt-img.jpg] [attr="value"] %}. Got: ' + text.strip()
        )
        self.text = text


# ---------- Recoverable, per variant ----------

class SourceUnavailableError(PictureTagError):
    pass


class SourceNotFoundError(SourceUnavailableError):
    def __init__(self, path) -> None:
        super().__init__(f"source image {path} is missing.")
        self.path = path


class GenerationError(PictureTagError):
    pass
