from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from article_reader.config import AppSettings
from article_reader.dependencies import get_article_reader_service, get_settings
from article_reader.models.article_contracts import ArticleRenderRequest, ArticleRenderResponse
from article_reader.services.article_reader_service import ArticleFetchError, ArticleReaderService

router = APIRouter()


@router.post(
    "/articles/render",
    response_model=ArticleRenderResponse,
    tags=["articles"],
    operation_id="render_article",
)
def render_article(
    request: ArticleRenderRequest,
    service: Annotated[ArticleReaderService, Depends(get_article_reader_service)],
    settings: Annotated[AppSettings, Depends(get_settings)],
) -> ArticleRenderResponse:
    indentation_symbol = (
        request.indentation_symbol
        if request.indentation_symbol is not None
        else settings.default_indentation_symbol
    )
    render = service.get_article_with_summary if request.summarize else service.get_article
    try:
        document = render(request.url, request.title, request.width, indentation_symbol)
    except ArticleFetchError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return ArticleRenderResponse(
        url=request.url,
        width=request.width,
        summarized=request.summarize,
        document=document,
    )
