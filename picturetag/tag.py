"""
The {% picture %} directive.

Syntax:  {% picture [preset] path/to/img.jpg [source_key: path/to/alt-img.jpg] [attr="value"] %}
Example: {% picture gallery poster.jpg source_small: poster_closeup.jpg
            alt="The strange case of responsive images" class="gal-img" data-selected %}
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from . import markup
from .config import SiteSettings
from .errors import TagSyntaxError
from .render import render

DIRECTIVE_RE = re.compile(
    r"^(?:(?P<preset>[^\s.:/]+)\s+)?"
    r"(?P<image_src>[^\s]+\.[a-zA-Z0-9]{3,4})\s*"
    r"(?P<source_src>(?:(?:source_[^\s.:/]+:\s+[^\s]+\.[a-zA-Z0-9]{3,4})\s*)+)?"
    r"(?P<html_attr>[\s\S]+)?$"
)
ATTR_RE = re.compile(r'(?P<attr>[^\s="]+)(?:="(?P<value>[^"]+)")?\s?')

# Whole tags inside page text
TAG_RE = re.compile(r"\{%-?\s*picture\s+(?P<params>.*?)\s*-?%\}", re.DOTALL)


@dataclass
class Directive:
    image_src: str
    preset_name: Optional[str] = None
    source_overrides: Dict[str, str] = field(default_factory=dict)
    html_attributes: Dict[str, Optional[str]] = field(default_factory=dict)


def unescape(text: str) -> str:
    return text.replace("\\{\\{", "{{").replace("\\{\\%", "{%")


def parse_attributes(text: Optional[str]) -> Dict[str, Optional[str]]:
    if not text:
        return {}
    return {m.group("attr"): m.group("value") for m in ATTR_RE.finditer(text)}


def parse_directive(text: str) -> Directive:
    params = unescape(text).strip()
    m = DIRECTIVE_RE.match(params)
    if not m:
        raise TagSyntaxError(text)

    overrides: Dict[str, str] = {}
    if m.group("source_src"):
        tokens = m.group("source_src").replace(":", "").split()
        overrides = dict(zip(tokens[::2], tokens[1::2]))

    return Directive(
        image_src=m.group("image_src"),
        preset_name=m.group("preset"),
        source_overrides=overrides,
        html_attributes=parse_attributes(m.group("html_attr")),
    )


def render_directive(text: str, site: SiteSettings) -> str:
    """Markup for one directive's parameters (the text between 'picture' and '%}')."""
    directive = parse_directive(text)
    preset = site.picture.preset(directive.preset_name)

    # Preset attr defaults, overridden by the directive's own attributes
    attributes: Dict[str, Optional[str]] = dict(preset.attributes)
    attributes.update(directive.html_attributes)

    result = render(site, directive.preset_name, directive.image_src, directive.source_overrides)
    return markup.emit(site.picture.markup, result, attributes, site.url)
