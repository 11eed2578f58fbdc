from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    brand_color: str = "#6366F1"
    default_background: str = "#ffffff"
    author_username: str = "@username"
    author_full_name: str = "Your Name"

    # Content thresholds
    max_chars_per_slide: int = 600  # Longer text slides are split on paragraph boundaries
    max_word_length: int = 30  # Longer words get a joining hyphen
    max_text_length: int = 50000
    max_slides: int = 20  # cap when a request asks for "auto"

    # Adaptive sizing
    fit_step: int = 4  # px decrement per fitting attempt

    # Rendering
    render_workers: int = 4
    avatar_timeout: float = 10.0

    # Assets
    font_path: str = "assets/fonts/Montserrat"

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
