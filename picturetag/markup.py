"""
Markup for a rendered picture.

Each emitter is a pure function of the RenderResult, the HTML attributes and
the site url. Variants without an output path are left out.
"""

import html
from typing import Callable, Dict, List, Mapping, Optional

from .render import RenderResult

# Escaped spaces keep markdown from reading the indented lines as code.
MARKDOWN_ESCAPE = "\\ "

Attributes = Mapping[str, Optional[str]]


def attr_string(attributes: Attributes) -> str:
    """'k="v"' for valued attributes, bare 'k' otherwise, space separated."""
    parts = []
    for name, value in attributes.items():
        if value is None:
            parts.append(name)
        else:
            parts.append(f'{name}="{html.escape(value, quote=True)}"')
    return " ".join(parts)


def _with_attrs(attributes: Attributes) -> str:
    s = attr_string(attributes)
    return f" {s}" if s else ""


def picturefill(result: RenderResult, attributes: Attributes, url: str = "") -> str:
    attrs: Dict[str, Optional[str]] = dict(attributes)
    alt = attrs.pop("alt", None)
    attrs["data-picture"] = None
    if alt is not None:
        attrs["data-alt"] = alt

    lines = [f"<span{_with_attrs(attrs)}>"]
    for v in result.variants:
        if v.skipped:
            continue
        media = "" if result.is_default(v) or not v.media else f' data-media="{html.escape(v.media)}"'
        lines.append(f'<span data-src="{url}{v.output_relative_path}"{media}></span>')
    noscript_alt = "" if alt is None else f' alt="{html.escape(alt)}"'
    lines.append(f'<noscript><img src="{url}{result.default_path}"{noscript_alt}></noscript>')
    lines.append("</span>")
    return "\n".join(lines) + "\n"


def picture(result: RenderResult, attributes: Attributes, url: str = "") -> str:
    lines = ["<picture>"]
    for v in result.variants:
        if v.skipped:
            continue
        media = "" if result.is_default(v) or not v.media else f' media="{html.escape(v.media)}"'
        lines.append(f'{MARKDOWN_ESCAPE * 4}<source srcset="{url}{v.output_relative_path}"{media}>')
    lines.append(f'{MARKDOWN_ESCAPE * 4}<img src="{url}{result.default_path}"{_with_attrs(attributes)}>')
    lines.append(f"{MARKDOWN_ESCAPE * 2}</picture>")
    return "\n".join(lines) + "\n"


def interchange(result: RenderResult, attributes: Attributes, url: str = "") -> str:
    data: List[str] = []
    for v in reversed(result.variants):
        if v.skipped:
            continue
        media = "(default)" if result.is_default(v) else v.media
        data.append(f"[{url}{v.output_relative_path}, {media}]")
    attrs = _with_attrs(attributes)
    return (
        f'<img data-interchange="{html.escape(", ".join(data))}"{attrs} />\n'
        f'<noscript><img src="{url}{result.default_path}"{attrs} /></noscript>'
    )


def img(result: RenderResult, attributes: Attributes, url: str = "") -> str:
    # Width descriptors use the pixel width actually written, which is smaller
    # than the declared width when the source was too small.
    srcset = ", ".join(
        f"{url}{v.output_relative_path} {v.resolved_width}w"
        for v in result.variants
        if not v.skipped
    )
    return f'<img srcset="{srcset}" src="{url}{result.default_path}"{_with_attrs(attributes)}>'


EMITTERS: Dict[str, Callable[[RenderResult, Attributes, str], str]] = {
    "picturefill": picturefill,
    "picture": picture,
    "interchange": interchange,
    "img": img,
}


def emit(mode: str, result: RenderResult, attributes: Attributes, url: str = "") -> str:
    try:
        emitter = EMITTERS[mode]
    except KeyError:
        raise ValueError(f"Unknown markup mode {mode!r}") from None
    return emitter(result, attributes, url)
