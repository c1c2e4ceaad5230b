from typing import Any

import httpx

from ..models import ApiError, ErrorKind

REMOTE_ERROR_MESSAGE = "API request failed"
NETWORK_ERROR_MESSAGE = "Network error - no response received"
BAD_RESPONSE_MESSAGE = "Network error - response could not be read"
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"

# Failures where the request left the client but no response came back
NO_RESPONSE_ERRORS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
    httpx.ProxyError,
)

# The server answered but the response could not be used
BAD_RESPONSE_ERRORS = (
    httpx.DecodingError,
    httpx.TooManyRedirects,
)


def response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def error_from_response(response: httpx.Response) -> ApiError:
    """Remote answered with an error status."""
    body = response_body(response)
    message = body.get("message") if isinstance(body, dict) else None
    if not isinstance(message, str) or not message:
        message = REMOTE_ERROR_MESSAGE
    return ApiError(kind=ErrorKind.REMOTE, status_code=response.status_code, message=message, raw_body=body)


def error_from_exception(exc: Exception) -> ApiError:
    """No usable response (status 0) or request never sent (status -1)."""
    if isinstance(exc, NO_RESPONSE_ERRORS):
        return ApiError(kind=ErrorKind.NETWORK, status_code=0, message=NETWORK_ERROR_MESSAGE)
    if isinstance(exc, BAD_RESPONSE_ERRORS):
        return ApiError(kind=ErrorKind.NETWORK, status_code=0, message=BAD_RESPONSE_MESSAGE)
    return ApiError(kind=ErrorKind.LOCAL, status_code=-1, message=str(exc) or UNKNOWN_ERROR_MESSAGE)


def validation_error(message: str) -> ApiError:
    return ApiError(kind=ErrorKind.VALIDATION, status_code=-1, message=message)
