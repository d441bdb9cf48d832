from __future__ import annotations

import inspect
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable

from fastapi import FastAPI, HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.responses import Response

from core.errors import ErrorCode

_RESPONSE_DOC_ATTR = "__response_doc_config__"


@dataclass(frozen=True)
class ResponseDocConfig:
    status_code: int
    description: str
    success_example: Any | None = None
    summary: str | None = None
    error_examples: dict[int, Any] | None = None


def error_payload(error: str, detail: str | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": error}
    if detail is not None:
        payload["detail"] = detail
    return payload


def error_response(
    *,
    status_code: int,
    error: str,
    detail: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        headers=headers,
        content=error_payload(error=error, detail=detail),
    )


def _parse_http_exception_detail(detail: Any, status_code: int) -> tuple[str, str | None]:
    if isinstance(detail, dict):
        error = detail.get("error")
        if isinstance(error, str) and error.strip():
            nested = detail.get("detail")
            return error, nested if isinstance(nested, str) else None
        return ErrorCode.SERVER_ERROR.value if status_code >= 500 else "request_failed", None

    if isinstance(detail, str) and detail.strip():
        return detail, None

    return ErrorCode.SERVER_ERROR.value if status_code >= 500 else "request_failed", None


def http_exception_response(exc: HTTPException) -> JSONResponse:
    error, detail = _parse_http_exception_detail(exc.detail, exc.status_code)
    return error_response(
        status_code=exc.status_code,
        error=error,
        detail=detail,
        headers=exc.headers,
    )


def document_response(
    *,
    status_code: int = status.HTTP_200_OK,
    description: str = "Successful response",
    success_example: Any | None = None,
    summary: str | None = None,
    error_examples: dict[int, Any] | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        config = ResponseDocConfig(
            status_code=status_code,
            description=description,
            success_example=success_example,
            summary=summary,
            error_examples=error_examples,
        )

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Response:
            result = func(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result

            if isinstance(result, Response):
                return result

            return JSONResponse(status_code=status_code, content=jsonable_encoder(result))

        setattr(wrapper, _RESPONSE_DOC_ATTR, config)
        return wrapper

    return decorator


def apply_response_documentation(app: FastAPI) -> None:
    updated = False

    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue

        config = getattr(route.endpoint, _RESPONSE_DOC_ATTR, None)
        if not isinstance(config, ResponseDocConfig):
            continue

        if config.summary and not route.summary:
            route.summary = config.summary

        route.status_code = config.status_code

        existing_responses = dict(route.responses or {})
        response_entry = dict(existing_responses.get(config.status_code, {}))
        response_entry.setdefault("description", config.description)
        if config.success_example is not None:
            content = dict(response_entry.get("content", {}))
            app_json = dict(content.get("application/json", {}))
            app_json.setdefault("example", config.success_example)
            content["application/json"] = app_json
            response_entry["content"] = content
        existing_responses[config.status_code] = response_entry

        for code, example in (config.error_examples or {}).items():
            entry = dict(existing_responses.get(code, {}))
            entry.setdefault("description", "Error response")
            entry_content = dict(entry.get("content", {}))
            entry_json = dict(entry_content.get("application/json", {}))
            entry_json.setdefault("example", example)
            entry_content["application/json"] = entry_json
            entry["content"] = entry_content
            existing_responses[code] = entry

        route.responses = existing_responses
        updated = True

    if updated:
        app.openapi_schema = None
