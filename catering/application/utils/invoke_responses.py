from __future__ import annotations

from typing import Any

from catering.domain.entities.invoke_response import ContentType, InvokeResponse


def message_response(text: str) -> InvokeResponse:
    return InvokeResponse(status_code=200, type=ContentType.MESSAGE, value=text)


def card_response(card: dict[str, Any]) -> InvokeResponse:
    return InvokeResponse(status_code=200, type=ContentType.CARD, value=card)


def login_request_response(login_url: str) -> InvokeResponse:
    return InvokeResponse(status_code=401, type=ContentType.LOGIN_REQUEST, value={"loginUrl": login_url})


def retry_after_response(seconds: int | float) -> InvokeResponse:
    return InvokeResponse(status_code=429, type=ContentType.RETRY_AFTER, value=seconds)


def client_error_response(status_code: int, code: str, message: str) -> InvokeResponse:
    if not 400 <= status_code < 500:
        raise ValueError(f"Client errors use a 4xx status, got {status_code}")
    return InvokeResponse(status_code=status_code, type=ContentType.ERROR, value={"code": code, "message": message})


def server_error_response(status_code: int, code: str, message: str) -> InvokeResponse:
    if not 500 <= status_code < 600:
        raise ValueError(f"Server errors use a 5xx status, got {status_code}")
    return InvokeResponse(status_code=status_code, type=ContentType.ERROR, value={"code": code, "message": message})
