"""
Markdown to slide descriptors.

- "# Title" starts an intro slide (accent); the paragraph right after it is the subtitle
- "## Title" starts a text slide; following paragraphs and lists become its blocks
- "> quote" lines become a quote slide (accent) sized by length
- Paragraphs before any heading open an untitled text slide
"""

import logging
import re
from typing import Optional

from carousel.models import Block, ListBlock, ParagraphBlock, SlideContent, SlideKind
from carousel.templates import build_final_slide

logger = logging.getLogger(__name__)

QUOTE_MEDIUM_CHARS = 100
QUOTE_SMALL_CHARS = 140
FALLBACK_TEXT_CHARS = 200

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
_LIST_ITEM_RE = re.compile(r"^(?:[-*+•]|\d+[.)])\s+(.*)$")
_QUOTE_RE = re.compile(r"^>\s?(.*)$")


def quote_size_hint(text: str) -> str:
    length = len(text)
    if length > QUOTE_SMALL_CHARS:
        return "small"
    if length > QUOTE_MEDIUM_CHARS:
        return "medium"
    return "large"


def _parse_blocks(text: str) -> list[dict]:
    """Group markdown lines into heading / paragraph / list / quote blocks."""
    blocks = []
    current: Optional[dict] = None

    def flush():
        nonlocal current
        if current:
            blocks.append(current)
        current = None

    for raw in text.replace("\r\n", "\n").split("\n"):
        line = raw.strip()

        if not line:
            flush()
            continue

        heading = _HEADING_RE.match(line)
        if heading:
            flush()
            blocks.append({"type": "heading", "level": len(heading.group(1)), "text": heading.group(2)})
            continue

        quote = _QUOTE_RE.match(line)
        if quote:
            if not current or current["type"] != "quote":
                flush()
                current = {"type": "quote", "lines": []}
            if quote.group(1).strip():
                current["lines"].append(quote.group(1).strip())
            continue

        item = _LIST_ITEM_RE.match(line)
        if item:
            if not current or current["type"] != "list":
                flush()
                current = {"type": "list", "items": []}
            current["items"].append(item.group(1).strip())
            continue

        if current and current["type"] == "list" and raw[:1] in (" ", "\t"):
            # indented continuation of the previous list item
            current["items"][-1] += " " + line
            continue

        if not current or current["type"] != "paragraph":
            flush()
            current = {"type": "paragraph", "lines": []}
        current["lines"].append(line)

    flush()
    return blocks


def parse_markdown_to_slides(text: str) -> list[SlideContent]:
    """Build slide descriptors from markdown text."""
    slides: list[SlideContent] = []
    body: Optional[dict] = None  # open text slide: {"title", "blocks"}
    pending_intro: Optional[str] = None

    def close_body():
        nonlocal body
        if body is not None:
            slides.append(SlideContent.text_slide(title=body["title"], blocks=tuple(body["blocks"])))
        body = None

    def close_intro(subtitle: Optional[str] = None):
        nonlocal pending_intro
        if pending_intro is not None:
            slides.append(SlideContent.intro(pending_intro, subtitle))
        pending_intro = None

    for block in _parse_blocks(text or ""):
        kind = block["type"]

        if kind == "paragraph" and pending_intro is not None:
            close_intro(" ".join(block["lines"]))
            continue
        close_intro()

        if kind == "heading":
            close_body()
            if block["level"] == 1:
                pending_intro = block["text"]
            else:
                body = {"title": block["text"], "blocks": []}
        elif kind == "quote":
            close_body()
            quote_text = " ".join(block["lines"])
            if quote_text:
                slides.append(SlideContent.quote(quote_text, quote_size_hint(quote_text)))
        else:
            if body is None:
                body = {"title": None, "blocks": []}
            content: Block
            if kind == "paragraph":
                content = ParagraphBlock(" ".join(block["lines"]))
            else:
                content = ListBlock(tuple(block["items"]))
            body["blocks"].append(content)

    close_intro()
    close_body()

    if not slides and text and text.strip():
        logger.warning("No slide structure found in text; using a single text slide")
        slides.append(SlideContent.text_slide(blocks=(ParagraphBlock(text.strip()[:FALLBACK_TEXT_CHARS]),)))

    logger.info(f"Parsed {len(slides)} slides: {[s.kind.value for s in slides]}")
    return slides


def add_final_slide(slides: list[SlideContent], final: Optional[dict]) -> list[SlideContent]:
    """Append a closing slide when ``final["enabled"]`` is set."""
    if not final or not final.get("enabled"):
        return slides
    closing = build_final_slide(
        final.get("type"),
        title=final.get("title"),
        text=final.get("text"),
        accent=None if final.get("color") is None else final.get("color") == "accent",
    )
    return [*slides, closing]


def count_kinds(slides: list[SlideContent]) -> dict:
    counts = {kind.value: 0 for kind in SlideKind}
    for slide in slides:
        counts[slide.kind.value] += 1
    return counts
