from __future__ import annotations

import logging
import re
from collections.abc import Callable
from time import perf_counter
from urllib.parse import urlparse

from article_reader.services.content_source import ContentSource, RetrievalError
from article_reader.services.document_assembler import (
    ArticleRequest,
    DocumentAssembler,
    SummaryResult,
)
from article_reader.services.markdown_normalizer import ConversionError, convert_to_markdown
from article_reader.services.summarizer import SummarizationError, Summarizer
from article_reader.telemetry import TelemetryClient, elapsed_ms
from article_reader.terminal.postprocessor import process

LOGGER = logging.getLogger("article_reader.reader")

Postprocessor = Callable[[str, str], str]


class ArticleFetchError(RuntimeError):
    pass


class ArticleReaderService:
    def __init__(
        self,
        *,
        content_source: ContentSource,
        summarizer: Summarizer,
        assembler: DocumentAssembler | None = None,
        postprocess: Postprocessor = process,
        telemetry: TelemetryClient | None = None,
    ) -> None:
        self._content_source = content_source
        self._summarizer = summarizer
        self._assembler = assembler if assembler is not None else DocumentAssembler()
        self._postprocess = postprocess
        self._telemetry = telemetry if telemetry is not None else TelemetryClient.disabled()

    def get_article(self, url: str, title: str, width: int, indentation_symbol: str) -> str:
        return self._get_article(url, title, width, indentation_symbol, summarize=False)

    def get_article_with_summary(
        self,
        url: str,
        title: str,
        width: int,
        indentation_symbol: str,
    ) -> str:
        return self._get_article(url, title, width, indentation_symbol, summarize=True)

    def _get_article(
        self,
        url: str,
        title: str,
        width: int,
        indentation_symbol: str,
        *,
        summarize: bool,
    ) -> str:
        started_at = perf_counter()
        try:
            fetched = self._content_source.fetch(url)
            article_markdown = convert_to_markdown(fetched.html)
        except (RetrievalError, ConversionError) as exc:
            self._telemetry.emit(
                "article.render.error",
                url=url,
                error_type=type(exc).__name__,
                duration_ms=elapsed_ms(started_at),
            )
            raise ArticleFetchError(f"could not fetch url: {exc}") from exc

        request = ArticleRequest(
            url=url,
            title=title.strip() or fetched.title or title_from_url(url),
            width=width,
            indentation_symbol=indentation_symbol,
            summarize=summarize,
        )
        summary = SummaryResult.not_requested()
        if summarize:
            summary = self._summarize(article_markdown, url)

        document = self._assembler.assemble(request, article_markdown, summary)
        rendered = self._postprocess(document.serialize(), url)

        self._telemetry.emit(
            "article.render.finish",
            url=url,
            summary_outcome=summary.outcome,
            regions=",".join(document.region_names()),
            duration_ms=elapsed_ms(started_at),
        )
        return rendered

    def _summarize(self, article_markdown: str, url: str) -> SummaryResult:
        try:
            return SummaryResult.succeeded(self._summarizer.summarize(article_markdown, url))
        except SummarizationError as exc:
            LOGGER.info("article summary unavailable url=%s reason=%s", url, exc)
            self._telemetry.emit("article.summary.failed", url=url, reason=str(exc))
            return SummaryResult.failed(str(exc))


def title_from_url(value: str) -> str:
    parsed = urlparse(value)
    slug = parsed.path.rstrip("/").rsplit("/", 1)[-1].strip()
    if not slug:
        host = parsed.hostname or "article"
        return f"Article from {host}"
    slug = re.sub(r"\.[a-z0-9]{2,4}$", "", slug, flags=re.IGNORECASE)
    words = re.split(r"[-_]+", slug)
    cleaned = " ".join(word for word in words if word)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if not cleaned:
        host = parsed.hostname or "article"
        return f"Article from {host}"
    return cleaned.title()
