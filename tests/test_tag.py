"""Tests for the {% picture %} directive front end."""

import dataclasses

import pytest

from picturetag.errors import InvalidOverrideError, TagSyntaxError, UnknownPresetError
from picturetag.tag import TAG_RE, parse_directive, render_directive


class TestParseDirective:
    def test_image_only(self):
        d = parse_directive("poster.jpg")
        assert (d.preset_name, d.image_src, d.source_overrides, d.html_attributes) == (None, "poster.jpg", {}, {})

    def test_full(self):
        d = parse_directive(
            'gallery img/poster.jpg source_small: img/poster_closeup.jpg\n'
            '   alt="The strange case of responsive images" class="gal-img" data-selected'
        )
        assert d.preset_name == "gallery"
        assert d.image_src == "img/poster.jpg"
        assert d.source_overrides == {"source_small": "img/poster_closeup.jpg"}
        assert d.html_attributes == {
            "alt": "The strange case of responsive images",
            "class": "gal-img",
            "data-selected": None,
        }

    def test_several_overrides(self):
        d = parse_directive("a.png source_a: b.png source_b:  c.jpeg")
        assert d.source_overrides == {"source_a": "b.png", "source_b": "c.jpeg"}

    def test_escaped_template_code_is_unescaped(self):
        d = parse_directive('a.png title="\\{\\{ page.title }}"')
        assert d.html_attributes == {"title": "{{ page.title }}"}

    @pytest.mark.parametrize("text", ["", "no image here", "gallery"])
    def test_unreadable(self, text):
        with pytest.raises(TagSyntaxError):
            parse_directive(text)


def test_tag_regex_finds_tags():
    text = 'x {% picture a.jpg alt="1" %} y {%- picture gallery b.png -%} z'
    assert [m.group("params") for m in TAG_RE.finditer(text)] == ['a.jpg alt="1"', "gallery b.png"]


class TestRenderDirective:
    def test_picture_markup(self, site, make_image):
        make_image()
        out = render_directive('img/photo.jpg alt="Red"', site)
        assert out.startswith("<picture>\n")
        assert out.count("<source ") == 4
        assert 'srcset="http://example.com/generated/img/photo-800by400-' in out
        assert 'alt="Red">' in out

    def test_preset_attributes_are_defaults(self, site, make_image):
        make_image()
        out = render_directive('gallery img/photo.jpg class="mine" alt="x"', site)
        assert '<img src="http://example.com/generated/img/photo-200by100-' in out
        assert 'class="mine" itemprop="image" alt="x">' in out
        assert 'media="(min-width: 800px)"' in out

    def test_markup_mode_from_config(self, site, make_image):
        make_image()
        site = dataclasses.replace(site, picture=dataclasses.replace(site.picture, markup="img"))
        out = render_directive("img/photo.jpg", site)
        assert out.startswith('<img srcset="http://example.com/generated/img/photo-800by400-')
        assert " 800w, " in out

    def test_unknown_preset(self, site):
        with pytest.raises(UnknownPresetError):
            render_directive("fancy img/photo.jpg", site)

    def test_unknown_source_key(self, site):
        with pytest.raises(InvalidOverrideError):
            render_directive("img/photo.jpg source_huge: img/other.jpg", site)
