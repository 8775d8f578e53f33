"""Shared pytest fixtures for picturetag tests."""

from pathlib import Path

import pytest
from PIL import Image

from picturetag.config import site_from_config


@pytest.fixture
def src_root(tmp_path) -> Path:
    root = tmp_path / "assets"
    root.mkdir()
    return root


@pytest.fixture
def dest_root(tmp_path) -> Path:
    return tmp_path / "_site" / "generated"


@pytest.fixture
def make_image(src_root):
    """Write a solid-colour image under src_root and return its path."""

    def _make(rel: str = "img/photo.jpg", size=(1000, 500), color=(200, 30, 30), **save_kwargs) -> Path:
        path = src_root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, color).save(path, **save_kwargs)
        return path

    return _make


@pytest.fixture
def site_config() -> dict:
    return {
        "url": "http://example.com",
        "picture": {
            "source": "assets",
            "output": "generated",
            "markup": "picture",
            "presets": {
                "default": {
                    "ppi": [1, 2],
                    "source_default": {"width": 400},
                    "source_small": {"width": 200, "media": "(max-width: 400px)"},
                },
                "gallery": {
                    "attr": {"class": "gallery", "itemprop": "image"},
                    "source_wide": {"width": 600, "height": 200, "media": "(min-width: 800px)"},
                    "source_default": {"height": 100},
                },
            },
        },
    }


@pytest.fixture
def site(tmp_path, site_config):
    return site_from_config(site_config, tmp_path)
