from __future__ import annotations

import logging
from typing import Any, Protocol

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

LOGGER = logging.getLogger("article_reader.summarizer")

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-lite"
DEFAULT_SUMMARY_TIMEOUT_SECONDS = 30.0

_PROMPT_TEMPLATE = """Please provide a concise summary of the following article from {url}.
Focus on the main points and key takeaways. Format the summary in a clear, readable manner.

Article content:
{article}"""


class SummarizationError(RuntimeError):
    pass


class Summarizer(Protocol):
    def summarize(self, article_text: str, source_url: str) -> str:
        ...


class GeminiSummarizer:
    def __init__(
        self,
        *,
        api_key: str | None,
        model: str = DEFAULT_GEMINI_MODEL,
        timeout_seconds: float = DEFAULT_SUMMARY_TIMEOUT_SECONDS,
        client: Any | None = None,
    ) -> None:
        self._api_key = api_key.strip() if isinstance(api_key, str) and api_key.strip() else None
        self._model = model
        self._timeout_seconds = max(1.0, timeout_seconds)
        self._client = client

    def summarize(self, article_text: str, source_url: str) -> str:
        client = self._get_client()
        prompt = _PROMPT_TEMPLATE.format(url=source_url, article=article_text)
        try:
            response = client.models.generate_content(model=self._model, contents=prompt)
        except genai_errors.APIError as exc:
            LOGGER.warning(
                "gemini summary request rejected model=%s code=%s",
                self._model,
                getattr(exc, "code", None),
            )
            raise SummarizationError(f"failed to generate summary: {exc}") from exc
        except Exception as exc:
            # Transport failures surface as httpx/socket errors from inside the client.
            LOGGER.warning(
                "gemini summary request failed model=%s error=%s",
                self._model,
                type(exc).__name__,
            )
            raise SummarizationError(f"failed to generate summary: {exc}") from exc

        summary = getattr(response, "text", None)
        if not isinstance(summary, str) or not summary.strip():
            raise SummarizationError("no summary generated")
        return summary.strip()

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client
        if self._api_key is None:
            raise SummarizationError("Gemini API key is not configured")
        try:
            self._client = genai.Client(
                api_key=self._api_key,
                http_options=genai_types.HttpOptions(timeout=int(self._timeout_seconds * 1000)),
            )
        except (ValueError, genai_errors.APIError) as exc:
            raise SummarizationError(f"failed to create Gemini client: {exc}") from exc
        return self._client
