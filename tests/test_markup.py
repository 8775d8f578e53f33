"""Tests for the markup emitters."""

import pytest

from picturetag import markup
from picturetag.generator import GeneratedVariant
from picturetag.render import RenderResult

RETINA = "(-webkit-min-device-pixel-ratio: 2), (min-resolution: 192dpi)"


@pytest.fixture
def result() -> RenderResult:
    return RenderResult(
        variants=[
            GeneratedVariant("source_default-x2", RETINA, "/g/a-800.jpg", 800, 400, 800),
            GeneratedVariant("source_default", None, "/g/a-400.jpg", 400, 200, 400),
            GeneratedVariant("source_small", "(max-width: 400px)", "/g/a-200.jpg", 200, 100, 200),
            GeneratedVariant("source_small-x2", "(max-width: 400px) and x", "", declared_width=400),
        ],
        default_key="source_default",
    )


def test_attr_string():
    assert markup.attr_string({"alt": 'say "hi"', "data-selected": None}) == 'alt="say &quot;hi&quot;" data-selected'


def test_picture(result):
    assert markup.picture(result, {"alt": "A"}, "http://x") == (
        "<picture>\n"
        f'\\ \\ \\ \\ <source srcset="http://x/g/a-800.jpg" media="{RETINA}">\n'
        '\\ \\ \\ \\ <source srcset="http://x/g/a-400.jpg">\n'
        '\\ \\ \\ \\ <source srcset="http://x/g/a-200.jpg" media="(max-width: 400px)">\n'
        '\\ \\ \\ \\ <img src="http://x/g/a-400.jpg" alt="A">\n'
        "\\ \\ </picture>\n"
    )


def test_picturefill(result):
    out = markup.picturefill(result, {"alt": "A", "class": "c"})
    lines = out.splitlines()
    assert lines[0] == '<span class="c" data-picture data-alt="A">'
    assert lines[1] == f'<span data-src="/g/a-800.jpg" data-media="{RETINA}"></span>'
    assert lines[2] == '<span data-src="/g/a-400.jpg"></span>'
    assert lines[3] == '<span data-src="/g/a-200.jpg" data-media="(max-width: 400px)"></span>'
    assert lines[4] == '<noscript><img src="/g/a-400.jpg" alt="A"></noscript>'
    assert lines[5] == "</span>"


def test_interchange_is_reversed(result):
    out = markup.interchange(result, {"alt": "A"})
    assert out.startswith(
        '<img data-interchange="[/g/a-200.jpg, (max-width: 400px)], '
        f'[/g/a-400.jpg, (default)], [/g/a-800.jpg, {RETINA}]" alt="A" />\n'
    )
    assert out.endswith('<noscript><img src="/g/a-400.jpg" alt="A" /></noscript>')


def test_img(result):
    assert markup.img(result, {}, "") == (
        '<img srcset="/g/a-800.jpg 800w, /g/a-400.jpg 400w, /g/a-200.jpg 200w" src="/g/a-400.jpg">'
    )


def test_skipped_variants_never_appear(result):
    for mode in markup.EMITTERS:
        assert "and x" not in markup.emit(mode, result, {})


def test_unknown_mode(result):
    with pytest.raises(ValueError):
        markup.emit("amp", result, {})


def test_img_uses_written_width():
    undersized = RenderResult(
        variants=[
            GeneratedVariant("source_default-x2", RETINA, "/g/a-1000.jpg", 1000, 500, 2000),
            GeneratedVariant("source_default", None, "/g/a-600.jpg", 600, 300, 600),
            GeneratedVariant("source_tall", "(orientation: portrait)", "/g/a-200.jpg", 200, 100, None, 100),
        ],
        default_key="source_default",
    )
    assert markup.img(undersized, {}) == (
        '<img srcset="/g/a-1000.jpg 1000w, /g/a-600.jpg 600w, /g/a-200.jpg 200w" src="/g/a-600.jpg">'
    )
