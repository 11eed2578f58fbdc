"""
Closing-slide templates for carousels.
Each template is a base that request settings may override field by field.
"""

from typing import Optional

from carousel.models import ParagraphBlock, SlideContent

FINAL_SLIDE_TEMPLATES = {
    "cta": {
        "id": "cta",
        "name": "Call to action",
        "title": "Подписывайтесь!",
        "paragraphs": ["Ставьте лайк, если полезно", "Больше контента в профиле"],
        "accent": True,
    },
    "contact": {
        "id": "contact",
        "name": "Contacts",
        "title": "Связаться со мной:",
        "paragraphs": ["email@example.com", "Telegram: @username", "website.com"],
        "accent": False,
    },
    "brand": {
        "id": "brand",
        "name": "Brand",
        "title": "Спасибо за внимание!",
        "paragraphs": ["Помогаю бизнесу расти", "Консультации и стратегии"],
        "accent": True,
    },
}

DEFAULT_FINAL_TITLE = "Спасибо за внимание!"
DEFAULT_FINAL_TEXT = "Больше контента в профиле"


def get_final_template(template_id: str) -> dict:
    """Get a final slide template by ID."""
    if template_id not in FINAL_SLIDE_TEMPLATES:
        raise ValueError(f"Unknown final slide template: {template_id}")
    return FINAL_SLIDE_TEMPLATES[template_id]


def list_final_templates():
    """List all final slide templates."""
    return [
        {"id": t["id"], "name": t["name"], "title": t["title"], "text": "\n\n".join(t["paragraphs"])}
        for t in FINAL_SLIDE_TEMPLATES.values()
    ]


def _paragraphs(text: str) -> tuple[ParagraphBlock, ...]:
    return tuple(ParagraphBlock(p.strip()) for p in text.split("\n\n") if p.strip())


def build_final_slide(
    template_id: Optional[str] = None,
    *,
    title: Optional[str] = None,
    text: Optional[str] = None,
    accent: Optional[bool] = None,
) -> SlideContent:
    """Build a closing text slide from a template plus named overrides.

    Without a template, the generic "thank you" slide is the base.
    """
    if template_id:
        base = get_final_template(template_id)
        base_title = base["title"]
        base_blocks = tuple(ParagraphBlock(p) for p in base["paragraphs"])
        base_accent = base["accent"]
    else:
        base_title = DEFAULT_FINAL_TITLE
        base_blocks = _paragraphs(DEFAULT_FINAL_TEXT)
        base_accent = True

    return SlideContent.text_slide(
        title=title or base_title,
        blocks=_paragraphs(text) if text else base_blocks,
        accent=base_accent if accent is None else accent,
    )
