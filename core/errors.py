from __future__ import annotations

from enum import Enum

from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    LAT_LNG_REQUIRED = "lat,lng required"
    LAT_LNG_INVALID = "lat,lng invalid"
    SERVER_ERROR = "server_error"


class AppException(HTTPException):
    def __init__(
        self,
        *,
        status_code: int,
        error: ErrorCode | str,
        detail: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        code = error.value if isinstance(error, ErrorCode) else error
        payload: dict[str, str] = {"error": code}
        if detail is not None:
            payload["detail"] = detail
        super().__init__(status_code=status_code, detail=payload, headers=headers)


class ValidationError(AppException):
    def __init__(self, error: ErrorCode = ErrorCode.LAT_LNG_REQUIRED) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, error=error)


class ConfigurationError(AppException):
    def __init__(self, setting_name: str) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error=f"missing_env_{setting_name}",
        )


class ServerError(AppException):
    def __init__(self, detail: str | None = None) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error=ErrorCode.SERVER_ERROR,
            detail=detail,
        )


class UpstreamError(ServerError):
    """The places provider failed or answered with something unusable."""

    def __init__(self, message: str, *, provider_status: str | None = None) -> None:
        self.provider_status = provider_status
        detail = f"{message} ({provider_status})" if provider_status else message
        super().__init__(detail=detail)


def missing_coordinates() -> ValidationError:
    return ValidationError(ErrorCode.LAT_LNG_REQUIRED)


def invalid_coordinates() -> ValidationError:
    return ValidationError(ErrorCode.LAT_LNG_INVALID)
