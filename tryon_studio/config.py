"""Configuration management for the try-on studio."""

import logging

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiConfig(BaseModel):
    """Remote image model connection settings."""
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.5-flash-image"
    timeout: float = 120.0  # image generation is slow


class MessagesConfig(BaseModel):
    """User-facing failure messages."""
    garment_empty: str = "未生成图片，请重试或修改提示词。"
    garment_failed: str = "生成失败，请重试。"
    try_on_empty: str = "生成换装图片失败，请重试。"
    try_on_failed: str = "生成失败，可能因为图片内容安全过滤，请更换图片重试。"


class StudioConfig(BaseSettings):
    """Main studio configuration."""

    # Sub-configs
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    messages: MessagesConfig = Field(default_factory=MessagesConfig)

    # Loaded from .env
    gemini_api_key: str | None = None

    download_filename: str = "try-on-result.png"
    force_png_mime: bool = False  # tag every outgoing image as image/png
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        env_nested_delimiter="__",
        extra="ignore",
    )


def load_config() -> StudioConfig:
    """Load configuration from environment and defaults."""
    return StudioConfig()


def configure_logging(level: str = "INFO") -> None:
    """Install a basic console handler for the server entry point."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
