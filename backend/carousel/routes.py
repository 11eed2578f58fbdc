"""
API routes for the carousel layout service.
"""

import base64
import logging
import time
from datetime import datetime, timezone
from typing import Annotated, Literal, Optional, Union

from fastapi import APIRouter, HTTPException
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field, field_validator

from carousel.config import get_settings
from carousel.design_templates import list_styles
from carousel.services.avatar import fetch_avatar
from carousel.services.content_parser import add_final_slide, count_kinds, parse_markdown_to_slides
from carousel.services.image_renderer import get_renderer
from carousel.services.layout.composer import ComposeOptions
from carousel.services.layout.splitter import break_slide_words, limit_slides, split_slides
from carousel.templates import list_final_templates

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()

VERSION = "1.0.0"


# Request/Response Models

class FinalSlideSettings(BaseModel):
    enabled: bool = False
    type: Optional[Literal["cta", "contact", "brand"]] = None
    title: Optional[str] = None
    text: Optional[str] = None
    color: Optional[Literal["default", "accent"]] = None


class CarouselSettings(BaseModel):
    style: Literal["default", "bright", "elegant"] = "default"
    brand_color: str = Field(default_factory=lambda: settings.brand_color, pattern=r"^#[0-9a-fA-F]{6}$")
    author_username: str = Field(default_factory=lambda: settings.author_username, max_length=100)
    author_full_name: str = Field(default_factory=lambda: settings.author_full_name, max_length=100)
    avatar_url: Optional[str] = None
    final_slide: Optional[FinalSlideSettings] = None
    max_chars_per_slide: Optional[int] = Field(default=None, ge=100, le=5000)
    max_slides: Union[Literal["auto"], Annotated[int, Field(ge=3, le=20)]] = "auto"


class GenerateCarouselRequest(BaseModel):
    text: str = Field(min_length=1)
    settings: CarouselSettings = Field(default_factory=CarouselSettings)

    @field_validator("text")
    @classmethod
    def check_length(cls, value: str) -> str:
        if len(value) > settings.max_text_length:
            raise ValueError(f"Text is longer than {settings.max_text_length} characters")
        return value


class CarouselMetadata(BaseModel):
    total_slides: int
    generated_at: str
    processing_time: float
    adapted_slides: list[int] = []
    failed_slides: list[int] = []
    slide_kinds: dict[str, int] = {}
    settings: dict = {}


class GenerateCarouselResponse(BaseModel):
    slides: list[dict]
    images: list[str]  # base64 PNG, one per slide
    metadata: CarouselMetadata


class StyleResponse(BaseModel):
    id: str
    name: str
    description: str


class FinalTemplateResponse(BaseModel):
    id: str
    name: str
    title: str
    text: str


class HealthResponse(BaseModel):
    status: str
    version: str


# Routes

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=VERSION)


@router.get("/final-slide-templates", response_model=list[FinalTemplateResponse])
async def final_slide_templates():
    """Get the closing-slide templates."""
    return [FinalTemplateResponse(**t) for t in list_final_templates()]


@router.get("/styles", response_model=list[StyleResponse])
async def styles():
    """Get the available slide styles."""
    return [StyleResponse(**s) for s in list_styles()]


@router.post("/generate-carousel", response_model=GenerateCarouselResponse)
async def generate_carousel(request: GenerateCarouselRequest):
    """
    Turn markdown into carousel slide images.

    - Parses headings, paragraphs, lists and quotes into slides
    - Appends the optional closing slide
    - Splits overlong text slides and hyphenates overlong words
    - Lays out and renders every slide as a PNG
    """
    started = time.perf_counter()
    options = request.settings

    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Text is empty")

    try:
        slides = parse_markdown_to_slides(request.text)
        final = options.final_slide.model_dump() if options.final_slide else None
        slides = add_final_slide(slides, final)
        slides = split_slides(slides, options.max_chars_per_slide or settings.max_chars_per_slide)
        max_slides = settings.max_slides if options.max_slides == "auto" else options.max_slides
        slides = limit_slides(slides, max_slides, keep_last=bool(final and final.get("enabled")))
        slides = [break_slide_words(slide, settings.max_word_length) for slide in slides]
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not slides:
        raise HTTPException(status_code=400, detail="No slides could be built from the text")

    avatar = await fetch_avatar(options.avatar_url, settings.avatar_timeout)

    try:
        renderer = get_renderer(
            ComposeOptions(
                brand_color=options.brand_color,
                default_background=settings.default_background,
                author_username=options.author_username,
                author_full_name=options.author_full_name,
                fit_step=settings.fit_step,
                style=options.style,
            ),
            avatar=avatar,
        )
        rendered = await run_in_threadpool(renderer.render_all, slides)
    except Exception as e:
        logger.exception("Carousel rendering failed")
        raise HTTPException(status_code=500, detail=f"Carousel generation failed: {str(e)}")

    elapsed = round(time.perf_counter() - started, 3)
    adapted = [r.index for r in rendered if r.adapted]
    failed = [r.index for r in rendered if r.failed]
    logger.info(f"Generated {len(rendered)} slides in {elapsed}s (adapted={adapted}, failed={failed})")

    return GenerateCarouselResponse(
        slides=[slide.to_dict() for slide in slides],
        images=[base64.b64encode(r.png).decode("ascii") for r in rendered],
        metadata=CarouselMetadata(
            total_slides=len(rendered),
            generated_at=datetime.now(timezone.utc).isoformat(),
            processing_time=elapsed,
            adapted_slides=adapted,
            failed_slides=failed,
            slide_kinds=count_kinds(slides),
            settings=options.model_dump(exclude={"final_slide"}),
        ),
    )
