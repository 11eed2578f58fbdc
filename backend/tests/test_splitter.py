import pytest

from carousel.models import ListBlock, ParagraphBlock, SlideContent
from carousel.services.layout.splitter import (
    break_long_words,
    break_slide_words,
    limit_slides,
    split_slide,
    split_slides,
)
from carousel.services.layout.wrap import ZWSP


def test_single_oversized_paragraph_is_kept_whole() -> None:
    slide = SlideContent.text_slide("Title", (ParagraphBlock("x" * 1000),))
    assert split_slide(slide, 600) == [slide]


def test_blocks_are_packed_greedily() -> None:
    blocks = (ParagraphBlock("a" * 300), ParagraphBlock("b" * 300), ParagraphBlock("c" * 300))
    slide = SlideContent.text_slide("Title", blocks, accent=True)
    parts = split_slide(slide, 600)

    assert [len(p.blocks) for p in parts] == [2, 1]
    assert parts[0].title == "Title"
    assert parts[1].title is None
    assert all(p.accent for p in parts)


def test_list_counts_all_items() -> None:
    slide = SlideContent.text_slide(blocks=(ListBlock(("a" * 400, "b" * 400)), ParagraphBlock("c" * 10)))
    parts = split_slide(slide, 600)
    assert [p.blocks for p in parts] == [(slide.blocks[0],), (slide.blocks[1],)]


def test_non_text_slides_pass_through() -> None:
    quote = SlideContent.quote("q" * 1000)
    intro = SlideContent.intro("t" * 1000)
    assert split_slides([intro, quote], 600) == [intro, quote]


def test_long_word_gets_joining_hyphens() -> None:
    assert break_long_words("a" * 35, 30) == "a" * 29 + "-" + ZWSP + "a" * 6


def test_short_words_are_untouched() -> None:
    text = "short words only " + "b" * 30
    assert break_long_words(text, 30) == text


def test_markup_delimiters_are_not_counted_or_split() -> None:
    word = "**" + "a" * 31 + "**"
    assert break_long_words(word, 30) == "**" + "a" * 29 + "-" + ZWSP + "aa**"
    assert break_long_words("**" + "a" * 30 + "**", 30) == "**" + "a" * 30 + "**"


def test_break_slide_words_covers_every_field() -> None:
    long = "z" * 40
    slide = SlideContent.text_slide(long, (ParagraphBlock(long), ListBlock((long,))))
    fixed = break_slide_words(slide, 30)
    assert ZWSP in fixed.title
    assert ZWSP in fixed.blocks[0].text
    assert ZWSP in fixed.blocks[1].items[0]


def test_limit_merges_continuation_slides_first() -> None:
    p1, p2, p3 = ParagraphBlock("one"), ParagraphBlock("two"), ParagraphBlock("three")
    slides = [
        SlideContent.intro("Intro"),
        SlideContent.text_slide("Title", (p1,)),
        SlideContent.text_slide(blocks=(p2,)),
        SlideContent.text_slide(blocks=(p3,)),
    ]
    limited = limit_slides(slides, 2)
    assert len(limited) == 2
    assert limited[0] == slides[0]
    assert limited[1].title == "Title"
    assert limited[1].blocks == (p1, p2, p3)


def test_limit_drops_from_the_end() -> None:
    slides = [SlideContent.intro(f"Slide {i}") for i in range(5)]
    assert limit_slides(slides, 3) == slides[:3]
    assert limit_slides(slides, 3, keep_last=True) == slides[:2] + slides[-1:]


def test_limit_never_merges_the_kept_last_slide() -> None:
    slides = [
        SlideContent.text_slide("A", (ParagraphBlock("a"),)),
        SlideContent.text_slide(blocks=(ParagraphBlock("b"),)),
        SlideContent.text_slide(blocks=(ParagraphBlock("c"),)),
    ]
    limited = limit_slides(slides, 2, keep_last=True)
    assert [s.blocks for s in limited] == [(ParagraphBlock("a"), ParagraphBlock("b")), (ParagraphBlock("c"),)]


def test_limit_under_cap_is_unchanged() -> None:
    slides = [SlideContent.quote("q")]
    assert limit_slides(slides, 3) == slides


def test_limit_must_be_positive() -> None:
    with pytest.raises(ValueError):
        limit_slides([SlideContent.quote("q")], 0)
