"""Inline tokenizer - turns ``**bold**`` / ``__underline__`` markup into style runs.

Grammar:
    __x__       underline
    **x**       bold
    __**x**__   bold + underline (``**__x__**`` too)

One nesting level, no escaping. A delimiter without a closing partner is kept
as literal text in the surrounding style; an empty pair produces nothing.
"""

from dataclasses import dataclass
from enum import Enum

BOLD_DELIM = "**"
UNDERLINE_DELIM = "__"


class RunStyle(Enum):
    PLAIN = (False, False)
    BOLD = (True, False)
    UNDERLINE = (False, True)
    BOLD_UNDERLINE = (True, True)

    @property
    def bold(self) -> bool:
        return self.value[0]

    @property
    def underline(self) -> bool:
        return self.value[1]

    @classmethod
    def of(cls, bold: bool, underline: bool) -> "RunStyle":
        return cls((bold, underline))

    def with_delimiter(self, delim: str) -> "RunStyle":
        if delim == BOLD_DELIM:
            return RunStyle.of(True, self.underline)
        return RunStyle.of(self.bold, True)


@dataclass(frozen=True)
class StyleRun:
    """Maximal text span sharing one (bold, underline) pair."""
    text: str
    style: RunStyle = RunStyle.PLAIN

    @property
    def bold(self) -> bool:
        return self.style.bold

    @property
    def underline(self) -> bool:
        return self.style.underline


def _next_delimiter(text: str, start: int, delimiters: tuple[str, ...]) -> tuple[int, str]:
    """Find the earliest delimiter at or after start; (-1, "") when none."""
    best_pos, best_delim = -1, ""
    for delim in delimiters:
        pos = text.find(delim, start)
        if pos != -1 and (best_pos == -1 or pos < best_pos):
            best_pos, best_delim = pos, delim
    return best_pos, best_delim


def _scan(text: str, style: RunStyle, delimiters: tuple[str, ...], nested: bool) -> list[StyleRun]:
    """Split text on matched delimiter pairs.

    The outer pass (nested=True) hands each matched span to an inner pass that
    only looks for the remaining delimiter kind.
    """
    runs = []
    pos = 0
    literal_start = 0

    while pos < len(text):
        open_pos, delim = _next_delimiter(text, pos, delimiters)
        if open_pos == -1:
            break

        close_pos = text.find(delim, open_pos + len(delim))
        if close_pos == -1:
            # Unmatched: keep the delimiter as literal text and move on
            pos = open_pos + len(delim)
            continue

        if open_pos > literal_start:
            runs.append(StyleRun(text[literal_start:open_pos], style))

        inner = text[open_pos + len(delim):close_pos]
        inner_style = style.with_delimiter(delim)
        if inner:
            if nested:
                remaining = tuple(d for d in delimiters if d != delim)
                runs.extend(_scan(inner, inner_style, remaining, nested=False))
            else:
                runs.append(StyleRun(inner, inner_style))

        pos = close_pos + len(delim)
        literal_start = pos

    if literal_start < len(text):
        runs.append(StyleRun(text[literal_start:], style))
    return runs


def merge_runs(runs: list[StyleRun]) -> list[StyleRun]:
    """Merge adjacent runs with identical style and drop empty ones."""
    merged: list[StyleRun] = []
    for run in runs:
        if not run.text:
            continue
        if merged and merged[-1].style == run.style:
            merged[-1] = StyleRun(merged[-1].text + run.text, run.style)
        else:
            merged.append(run)
    return merged


def tokenize(text: str) -> list[StyleRun]:
    """Tokenize marked-up text into the minimal list of style runs."""
    if not text:
        return []
    runs = _scan(text, RunStyle.PLAIN, (BOLD_DELIM, UNDERLINE_DELIM), nested=True)
    return merge_runs(runs)


def strip_markup(text: str) -> str:
    """Plain text of a marked-up string."""
    return "".join(run.text for run in tokenize(text))
