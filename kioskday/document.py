"""
Document linearization (exported HTML -> DocumentNode sequence).

- Walks every element of the export in document order
- <img> elements become image nodes carrying their src
- a block element with no block children (a paragraph, list item, table
  cell, heading) becomes a text node holding all of its visible text, so a
  label split over inline runs ("<span>Monday</span><span>:</span>") reads
  as one string; the inline elements inside it contribute no text of their own
- every other element becomes a text node holding only the text placed
  directly inside it (a wrapper never repeats the text of its children)

Nothing here knows about weekdays; see day_labels.py / associate.py.
"""

from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup, Comment, Tag

from kioskday.model import DocumentNode


# Elements whose content is never visible on the page
_INVISIBLE_TAGS = ("head", "script", "style", "noscript", "template")

_BLOCK_TAGS = (
    "p", "div", "li", "td", "th", "dt", "dd", "caption",
    "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "pre",
)


def _join(strings: List[str]) -> str:
    return " ".join("".join(strings).split())


def _own_text(el: Tag) -> str:
    """
    Return the text nodes that are direct children of el, joined.
    """
    return _join([str(s) for s in el.find_all(string=True, recursive=False) if not isinstance(s, Comment)])


def _full_text(el: Tag) -> str:
    """
    Return all visible text inside el, inline runs glued together.
    """
    return _join([str(s) for s in el.find_all(string=True) if not isinstance(s, Comment)])


def _is_text_block(el: Tag) -> bool:
    return el.name in _BLOCK_TAGS and el.find(list(_BLOCK_TAGS)) is None


def linearize_html(html: str) -> List[DocumentNode]:
    """
    Parse an exported HTML document into a list of DocumentNode objects.

    Indices are assigned 0..n-1 in document order.
    """
    soup = BeautifulSoup(html or "", "html.parser")

    for tag in soup(list(_INVISIBLE_TAGS)):
        tag.decompose()

    nodes: List[DocumentNode] = []
    for el in soup.find_all(True):
        idx = len(nodes)
        if el.name == "img":
            src = (el.get("src") or "").strip()
            nodes.append(DocumentNode(index=idx, is_image=True, image_source=src))
        elif _is_text_block(el):
            nodes.append(DocumentNode(index=idx, text=_full_text(el)))
        elif any(_is_text_block(parent) for parent in el.parents if isinstance(parent, Tag)):
            # already counted in the enclosing block
            nodes.append(DocumentNode(index=idx, text=""))
        else:
            nodes.append(DocumentNode(index=idx, text=_own_text(el)))

    return nodes


def linearize_parts(parts: List[object]) -> List[DocumentNode]:
    """
    Build a node sequence from plain Python values.

    Strings become text nodes; ("img", src) tuples become image nodes.
    Handy when the markup has already been parsed by another collaborator.
    """
    nodes: List[DocumentNode] = []
    for i, part in enumerate(parts):
        if isinstance(part, tuple) and len(part) == 2 and part[0] == "img":
            nodes.append(DocumentNode(index=i, is_image=True, image_source=str(part[1] or "")))
        elif isinstance(part, str):
            nodes.append(DocumentNode(index=i, text=part))
        else:
            raise ValueError(f"Unsupported document part: {part!r}")
    return nodes
