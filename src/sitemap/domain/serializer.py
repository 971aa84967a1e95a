"""Render sitemap entries as XML or plaintext.

Callers build an explicit ``Element`` tree; rendering walks it recursively and
never reorders anything, so the output follows the input order exactly.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from html import escape

from src.sitemap.domain.models import FORMAT_TEXT, FORMAT_XML, Entry

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
XHTML_NAMESPACE = "http://www.w3.org/1999/xhtml"
NAMESPACE_ATTRIBUTES = f'xmlns="{SITEMAP_NAMESPACE}" xmlns:xhtml="{XHTML_NAMESPACE}"'


@dataclass(frozen=True)
class Element:
    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: tuple[Element, ...] = ()
    text: str | None = None


def render_element(element: Element, depth: int = 1) -> str:
    pad = "  " * depth
    attrs = "".join(f' {key}="{escape(str(value))}"' for key, value in element.attributes.items())
    if element.children:
        inner = "".join(render_element(child, depth + 1) for child in element.children)
        return f"{pad}<{element.name}{attrs}>\n{inner}{pad}</{element.name}>\n"
    if element.text is None:
        return f"{pad}<{element.name}{attrs}/>\n"
    return f"{pad}<{element.name}{attrs}>{escape(element.text)}</{element.name}>\n"


def format_priority(priority: float) -> str:
    return str(float(priority))


def entry_to_element(entry: Entry) -> Element:
    children = [
        Element("loc", text=entry.url),
        Element("priority", text=format_priority(entry.priority)),
        Element("changefreq", text=entry.change_frequency),
    ]
    children.extend(
        Element(
            "xhtml:link",
            attributes={"rel": "alternate", "hreflang": locale, "href": url},
        )
        for locale, url in entry.alternates
    )
    return Element("url", children=tuple(children))


def serialize(entries: Iterable[Entry | str], fmt: str = FORMAT_XML) -> str:
    if fmt == FORMAT_TEXT:
        return "".join(item for item in entries if isinstance(item, str))
    if fmt != FORMAT_XML:
        raise ValueError(f"Unsupported sitemap format: {fmt}")
    return "".join(render_element(entry_to_element(item)) for item in entries if isinstance(item, Entry))


def wrap_document(body: str, fmt: str = FORMAT_XML) -> str:
    if fmt == FORMAT_TEXT:
        return body
    return f"{XML_DECLARATION}<urlset {NAMESPACE_ATTRIBUTES}>\n{body}</urlset>\n"


def build_index(locations: Sequence[str], lastmod: str) -> str:
    body = "".join(
        render_element(
            Element(
                "sitemap",
                children=(Element("loc", text=loc), Element("lastmod", text=lastmod)),
            )
        )
        for loc in locations
    )
    return f"{XML_DECLARATION}<sitemapindex {NAMESPACE_ATTRIBUTES}>\n{body}</sitemapindex>\n"
