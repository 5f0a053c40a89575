from __future__ import annotations

from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ArticleRenderRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str = Field(max_length=2048)
    title: str = Field(default="", max_length=500)
    width: int = Field(default=80, ge=20, le=400)
    indentation_symbol: str | None = Field(default=None, max_length=16)
    summarize: bool = False

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        normalized = value.strip()
        if any(ord(character) < 32 for character in normalized):
            raise ValueError("url contains control characters")
        parsed = urlparse(normalized)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError("url must be an absolute http/https URL")
        if parsed.username or parsed.password:
            raise ValueError("url must not contain credentials")
        return normalized

    @field_validator("title", mode="before")
    @classmethod
    def _normalize_title(cls, value: object) -> str:
        if not isinstance(value, str):
            return ""
        return value.strip()

    @field_validator("indentation_symbol")
    @classmethod
    def _validate_indentation_symbol(cls, value: str | None) -> str | None:
        if value is not None and "\n" in value:
            raise ValueError("indentation_symbol must be a single line")
        return value


class ArticleRenderResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str
    width: int
    summarized: bool
    document: str
