from __future__ import annotations

from functools import lru_cache

from article_reader.config import AppSettings, load_settings
from article_reader.services.article_reader_service import ArticleReaderService
from article_reader.services.content_source import ReadabilityContentSource
from article_reader.services.document_assembler import DocumentAssembler
from article_reader.services.summarizer import GeminiSummarizer
from article_reader.telemetry import TelemetryClient, build_telemetry_client


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return load_settings()


@lru_cache(maxsize=1)
def get_telemetry() -> TelemetryClient:
    settings = get_settings()
    return build_telemetry_client(
        enabled=settings.telemetry_enabled,
        sink=settings.telemetry_sink,
    )


@lru_cache(maxsize=1)
def get_article_reader_service() -> ArticleReaderService:
    settings = get_settings()
    return ArticleReaderService(
        content_source=ReadabilityContentSource(
            timeout_seconds=settings.fetch_timeout_seconds,
            user_agent=settings.fetch_user_agent,
        ),
        summarizer=GeminiSummarizer(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout_seconds=settings.summary_timeout_seconds,
        ),
        assembler=DocumentAssembler(),
        telemetry=get_telemetry(),
    )


def reset_cached_dependencies() -> None:
    get_settings.cache_clear()
    get_telemetry.cache_clear()
    get_article_reader_service.cache_clear()
