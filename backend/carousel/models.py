"""Slide content descriptors handed to the layout engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class SlideKind(str, Enum):
    INTRO = "intro"
    TEXT = "text"
    QUOTE = "quote"


@dataclass(frozen=True)
class ParagraphBlock:
    text: str

    @property
    def char_count(self) -> int:
        return len(self.text)

    def to_dict(self) -> dict:
        return {"paragraph": self.text}


@dataclass(frozen=True)
class ListBlock:
    items: tuple[str, ...]

    @property
    def char_count(self) -> int:
        return sum(len(item) for item in self.items)

    def to_dict(self) -> dict:
        return {"list": list(self.items)}


Block = Union[ParagraphBlock, ListBlock]


@dataclass(frozen=True)
class SlideContent:
    """One slide's structured text.

    intro: title + optional subtitle
    text: optional title + paragraph/list blocks
    quote: text + size hint (large, medium, small)
    """
    kind: SlideKind
    title: Optional[str] = None
    subtitle: Optional[str] = None
    blocks: tuple[Block, ...] = field(default_factory=tuple)
    text: Optional[str] = None
    size_hint: Optional[str] = None
    accent: bool = False

    @classmethod
    def intro(cls, title: str, subtitle: Optional[str] = None, accent: bool = True) -> "SlideContent":
        return cls(kind=SlideKind.INTRO, title=title, subtitle=subtitle or None, accent=accent)

    @classmethod
    def text_slide(
        cls,
        title: Optional[str] = None,
        blocks: tuple[Block, ...] = (),
        accent: bool = False,
    ) -> "SlideContent":
        return cls(kind=SlideKind.TEXT, title=title or None, blocks=tuple(blocks), accent=accent)

    @classmethod
    def quote(cls, text: str, size_hint: str = "large", accent: bool = True) -> "SlideContent":
        return cls(kind=SlideKind.QUOTE, text=text, size_hint=size_hint, accent=accent)

    @property
    def body_char_count(self) -> int:
        return sum(block.char_count for block in self.blocks)

    def to_dict(self) -> dict:
        data = {"type": self.kind.value, "color": "accent" if self.accent else "default"}
        if self.kind == SlideKind.INTRO:
            data["title"] = self.title
            data["subtitle"] = self.subtitle
        elif self.kind == SlideKind.TEXT:
            data["title"] = self.title
            data["blocks"] = [block.to_dict() for block in self.blocks]
        else:
            data["text"] = self.text
            data["size"] = self.size_hint
        return data
