"""Wrap engine - greedy line breaking of style runs against a measured width."""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from .tokenizer import RunStyle, StyleRun
from .typography import to_display

logger = logging.getLogger(__name__)

ZWSP = "\u200b"  # zero-width break opportunity
FALLBACK_CHAR_WIDTH_RATIO = 0.55  # average glyph advance / font size

# Breaking whitespace or a zero-width break. NBSP is deliberately absent.
_BREAK_RE = re.compile(r"([ \t\r\n\f\v]+|\u200b)")
# Other whitespace is measured as plain spaces
_AS_SPACES = str.maketrans("\t\r\n\f\v", "     ")

MeasureFn = Callable[[str, bool], float]


@dataclass
class PlacedRun:
    """A run fragment placed on a line with its measured width."""
    text: str
    bold: bool
    underline: bool
    width: float
    is_space: bool = False

    @property
    def display_text(self) -> str:
        return to_display(self.text)


@dataclass
class Line:
    runs: list[PlacedRun] = field(default_factory=list)
    width: float = 0.0

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def display_text(self) -> str:
        return to_display(self.text)


@dataclass
class Separator:
    text: str  # the original whitespace, or "" for a zero-width break
    style: RunStyle


@dataclass
class Word:
    """Unbreakable unit; may span several style runs."""
    pieces: list[tuple[str, RunStyle]]
    separator: Optional[Separator] = None


def split_words(runs: list[StyleRun]) -> list[Word]:
    """Expand style runs into words with the separator that precedes each one."""
    words: list[Word] = []
    pieces: list[tuple[str, RunStyle]] = []
    pending: Optional[Separator] = None

    for run in runs:
        for i, part in enumerate(_BREAK_RE.split(run.text)):
            if i % 2 == 0:
                if part:
                    pieces.append((part, run.style))
                continue

            sep_text = "" if part == ZWSP else part
            if pieces:
                words.append(Word(pieces, pending))
                pieces = []
                pending = Separator(sep_text, run.style)
            elif pending is not None and sep_text:
                # breaks that meet across a run boundary form one separator
                pending = Separator(pending.text + sep_text, pending.style)

    if pieces:
        words.append(Word(pieces, pending))
    return words


class _LineState:
    def __init__(self):
        self.lines: list[Line] = []
        self.runs: list[PlacedRun] = []
        self.width = 0.0

    def add(self, text: str, style: RunStyle, width: float, is_space: bool = False):
        self.runs.append(PlacedRun(text, style.bold, style.underline, width, is_space))
        self.width += width

    def break_line(self):
        if self.runs:
            self.lines.append(Line(self.runs, self.width))
        self.runs = []
        self.width = 0.0


class WrapEngine:
    """Lays out style runs into lines no wider than a maximum width.

    ``measure(text, bold)`` is injected; a failing measurement is replaced by a
    character-count estimate so one bad glyph never sinks a slide.
    """

    def __init__(self, measure: MeasureFn, font_size: int):
        self._measure_fn = measure
        self.font_size = font_size
        self.degraded = False

    def measure(self, text: str, bold: bool) -> float:
        if not text:
            return 0.0
        try:
            return float(self._measure_fn(to_display(text).translate(_AS_SPACES), bold))
        except Exception as e:
            if not self.degraded:
                logger.warning(f"Text measurement failed ({e}); using character estimate")
                self.degraded = True
            return len(text) * self.font_size * FALLBACK_CHAR_WIDTH_RATIO

    def _word_width(self, word: Word) -> float:
        return sum(self.measure(text, style.bold) for text, style in word.pieces)

    def _place_word(self, word: Word, state: _LineState):
        for text, style in word.pieces:
            state.add(text, style, self.measure(text, style.bold))

    def _place_by_char(self, word: Word, state: _LineState, max_width: float):
        """Force breaks inside a word that is wider than a whole line."""
        for text, style in word.pieces:
            chunk = ""
            chunk_width = 0.0
            for ch in text:
                candidate = self.measure(chunk + ch, style.bold)
                if state.width + candidate > max_width and (chunk or state.runs):
                    if chunk:
                        state.add(chunk, style, chunk_width)
                    state.break_line()
                    chunk = ch
                    chunk_width = self.measure(ch, style.bold)
                else:
                    chunk += ch
                    chunk_width = candidate
            if chunk:
                state.add(chunk, style, chunk_width)

    def wrap(self, runs: list[StyleRun], max_width: float) -> list[Line]:
        words = split_words(runs)
        if not words:
            return []

        state = _LineState()

        if max_width <= 0:
            logger.warning(f"Non-positive wrap width {max_width}; placing one word per line")
            for word in words:
                self._place_word(word, state)
                state.break_line()
            return state.lines

        for word in words:
            word_width = self._word_width(word)

            if state.runs:
                sep = word.separator
                sep_width = self.measure(sep.text, sep.style.bold) if sep and sep.text else 0.0
                if state.width + sep_width + word_width <= max_width:
                    if sep and sep.text:
                        state.add(sep.text, sep.style, sep_width, is_space=True)
                    self._place_word(word, state)
                    continue
                # separator at the wrap point is dropped
                state.break_line()

            if word_width <= max_width:
                self._place_word(word, state)
            else:
                self._place_by_char(word, state, max_width)

        state.break_line()
        return state.lines

    def count_lines(self, runs: list[StyleRun], max_width: float) -> int:
        return len(self.wrap(runs, max_width))
