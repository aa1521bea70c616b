"""Reference extraction from HTML documents and stylesheets."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List

from bs4 import BeautifulSoup

REMOTE_PATTERN = re.compile(r"^(https?:|data:|javascript:|mailto:|#|//)", re.IGNORECASE)
CSS_URL_PATTERN = re.compile(r"""url\s*\(\s*["']?([^"')\s]+)["']?\s*\)""", re.IGNORECASE)

# Tag name -> attribute that may point at a local file.
_TAG_ATTRIBUTES: Dict[str, str] = {
    "img": "src",
    "script": "src",
    "video": "src",
    "audio": "src",
    "source": "src",
    "embed": "src",
    "input": "src",
    "link": "href",
    "object": "data",
}


def is_local_ref(ref: str) -> bool:
    """Return True unless the reference is remote, inline data or a fragment."""
    ref = ref.strip()
    return bool(ref) and not REMOTE_PATTERN.match(ref)


def _unique_local(refs: Iterable[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for ref in refs:
        ref = ref.strip()
        if is_local_ref(ref) and ref not in seen:
            seen[ref] = None
    return list(seen)


def extract_css_refs(text: str) -> List[str]:
    """Collect local ``url(...)`` references from CSS or any text containing CSS."""
    return _unique_local(match.group(1) for match in CSS_URL_PATTERN.finditer(text))


def _iter_tag_refs(soup: BeautifulSoup) -> Iterable[str]:
    for tag in soup.find_all(list(_TAG_ATTRIBUTES)):
        value = tag.get(_TAG_ATTRIBUTES[tag.name])
        if isinstance(value, list):
            value = " ".join(value)
        if value:
            yield value


def extract_html_refs(html: str) -> List[str]:
    """Collect local file references from tag attributes and inline CSS."""
    soup = BeautifulSoup(html, "html.parser")
    return _unique_local([*_iter_tag_refs(soup), *extract_css_refs(html)])
