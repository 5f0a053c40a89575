from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from readability import Document
from readability.readability import Unparseable

from article_reader.terminal.ansi import strip_ansi
from article_reader.terminal.markers import strip_markers

LOGGER = logging.getLogger("article_reader.content_source")

DEFAULT_FETCH_TIMEOUT_SECONDS = 6.0
DEFAULT_USER_AGENT = "article-reader/0.1"


class RetrievalError(RuntimeError):
    def __init__(self, message: str, *, http_status: int | None = None) -> None:
        super().__init__(message)
        self.http_status = http_status


@dataclass(frozen=True)
class FetchedArticle:
    url: str
    html: str
    title: str | None


class ContentSource(Protocol):
    def fetch(self, url: str) -> FetchedArticle:
        ...


class ReadabilityContentSource:
    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._timeout_seconds = max(1.0, timeout_seconds)
        self._user_agent = user_agent.strip() or DEFAULT_USER_AGENT

    def fetch(self, url: str) -> FetchedArticle:
        page = self._fetch_html(url)
        document = Document(page, url=url)
        try:
            content = document.summary(html_partial=True)
            title = document.short_title()
        except Unparseable as exc:
            raise RetrievalError(f"unparseable_page: {exc}") from exc

        return FetchedArticle(
            url=url,
            html=sanitize_markup(content),
            title=_normalize_optional_text(sanitize_markup(title or "")),
        )

    def _fetch_html(self, url: str) -> str:
        request = Request(
            url,
            headers={
                "Accept": "text/html,application/xhtml+xml",
                "User-Agent": self._user_agent,
            },
            method="GET",
        )
        try:
            with urlopen(request, timeout=self._timeout_seconds) as response:
                charset = response.headers.get_content_charset() or "utf-8"
                body = response.read().decode(charset, errors="replace")
        except HTTPError as exc:
            LOGGER.info("article fetch rejected url=%s http_status=%s", url, exc.code)
            raise RetrievalError(f"http_{exc.code}", http_status=int(exc.code)) from exc
        except (URLError, TimeoutError, OSError) as exc:
            LOGGER.info("article fetch failed url=%s error=%s", url, type(exc).__name__)
            raise RetrievalError(f"network_error:{type(exc).__name__}") from exc

        if _normalize_optional_text(body) is None:
            raise RetrievalError("empty_response")
        return body


def sanitize_markup(markup: str) -> str:
    return strip_markers(strip_ansi(markup))


def _normalize_optional_text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    normalized = value.strip()
    if not normalized:
        return None
    return normalized
