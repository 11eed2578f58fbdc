"""Content splitter - spreads oversized text slides and pre-breaks very long words."""

import dataclasses
import logging
import re

from ...models import Block, ListBlock, ParagraphBlock, SlideContent, SlideKind
from .wrap import ZWSP

logger = logging.getLogger(__name__)

JOINING_HYPHEN = "-"

_WORD_RE = re.compile(r"\S+")
_DELIM_RE = re.compile(r"(\*\*|__)")


def split_slide(slide: SlideContent, max_chars: int) -> list[SlideContent]:
    """Split a text slide's blocks across several slides.

    Blocks are packed greedily until adding the next one would pass
    ``max_chars``. A single block longer than the limit is kept whole.
    """
    if slide.kind != SlideKind.TEXT or slide.body_char_count <= max_chars:
        return [slide]

    groups: list[list[Block]] = []
    current: list[Block] = []
    current_chars = 0
    for block in slide.blocks:
        if current and current_chars + block.char_count > max_chars:
            groups.append(current)
            current, current_chars = [], 0
        current.append(block)
        current_chars += block.char_count
    if current:
        groups.append(current)

    logger.info(f"Split text slide '{slide.title or ''}' ({slide.body_char_count} chars) into {len(groups)} slides")
    return [
        dataclasses.replace(slide, blocks=tuple(group), title=slide.title if i == 0 else None)
        for i, group in enumerate(groups)
    ]


def split_slides(slides: list[SlideContent], max_chars: int) -> list[SlideContent]:
    result = []
    for slide in slides:
        result.extend(split_slide(slide, max_chars))
    return result


def _break_word(word: str, max_len: int) -> str:
    # Markup delimiters stay intact and do not count towards the length
    out = []
    count = 0
    for part in _DELIM_RE.split(word):
        if _DELIM_RE.fullmatch(part):
            out.append(part)
            continue
        for ch in part:
            if count == max_len - 1:
                out.append(JOINING_HYPHEN + ZWSP)
                count = 0
            out.append(ch)
            count += 1
    return "".join(out)


def break_long_words(text: str, max_len: int) -> str:
    """Insert a joining hyphen plus a break opportunity into words over max_len."""
    if not text or max_len < 2:
        return text

    def replace(match: re.Match) -> str:
        word = match.group(0)
        if len(_DELIM_RE.sub("", word)) <= max_len:
            return word
        return _break_word(word, max_len)

    return _WORD_RE.sub(replace, text)


def break_slide_words(slide: SlideContent, max_len: int) -> SlideContent:
    """Apply break_long_words to every text field of a slide."""
    def fix(value):
        return break_long_words(value, max_len) if value else value

    blocks = tuple(
        ParagraphBlock(fix(block.text)) if isinstance(block, ParagraphBlock)
        else ListBlock(tuple(fix(item) for item in block.items))
        for block in slide.blocks
    )
    return dataclasses.replace(
        slide,
        title=fix(slide.title),
        subtitle=fix(slide.subtitle),
        text=fix(slide.text),
        blocks=blocks,
    )


def limit_slides(slides: list[SlideContent], max_slides: int, keep_last: bool = False) -> list[SlideContent]:
    """Cap the number of slides.

    Untitled continuation slides are first merged back into the text slide
    before them. Anything still over the cap is dropped from the end; with
    ``keep_last`` the closing slide survives.
    """
    if max_slides < 1:
        raise ValueError(f"Slide limit must be positive, got {max_slides}")
    if len(slides) <= max_slides:
        return slides

    slides = list(slides)
    i = len(slides) - 1
    while len(slides) > max_slides and i > 0:
        prev, cur = slides[i - 1], slides[i]
        protected = keep_last and i == len(slides) - 1
        if prev.kind == SlideKind.TEXT and cur.kind == SlideKind.TEXT and cur.title is None and not protected:
            slides[i - 1] = dataclasses.replace(prev, blocks=prev.blocks + cur.blocks)
            del slides[i]
        i -= 1

    if len(slides) > max_slides:
        dropped = len(slides) - max_slides
        slides = slides[:max_slides - 1] + slides[-1:] if keep_last else slides[:max_slides]
        logger.warning(f"Dropped {dropped} slides over the limit of {max_slides}")
    return slides
