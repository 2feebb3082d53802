import pytest

from catering.application.utils.invoke_responses import (
    card_response,
    client_error_response,
    login_request_response,
    message_response,
    retry_after_response,
    server_error_response,
)
from catering.domain.entities.invoke_response import ContentType


def test_message_response():
    response = message_response("hello")
    assert (response.status_code, response.type, response.value) == (200, ContentType.MESSAGE, "hello")
    assert response.to_wire() == {
        "statusCode": 200,
        "type": "application/vnd.microsoft.activity.message",
        "value": "hello",
    }


def test_card_response():
    card = {"type": "AdaptiveCard", "body": []}
    response = card_response(card)
    assert response.status_code == 200
    assert response.to_wire()["type"] == "application/vnd.microsoft.card.adaptive"
    assert response.value is card


def test_login_request_response():
    response = login_request_response("https://login.example/start")
    assert response.status_code == 401
    assert response.type is ContentType.LOGIN_REQUEST
    assert response.value == {"loginUrl": "https://login.example/start"}


def test_retry_after_response():
    response = retry_after_response(15)
    assert response.to_wire() == {
        "statusCode": 429,
        "type": "application/vnd.microsoft.activity.retryAfter",
        "value": 15,
    }


def test_error_responses_carry_code_and_message():
    client = client_error_response(418, "418", "I am a little teapot.")
    server = server_error_response(503, "503", "Try later.")

    assert client.status_code == 418
    assert client.to_wire()["type"] == "application/vnd.microsoft.error"
    assert client.value == {"code": "418", "message": "I am a little teapot."}
    assert server.status_code == 503
    assert server.type is ContentType.ERROR
    assert server.value == {"code": "503", "message": "Try later."}


@pytest.mark.parametrize("status", [200, 399, 500])
def test_client_error_rejects_non_4xx(status):
    with pytest.raises(ValueError):
        client_error_response(status, "x", "y")


@pytest.mark.parametrize("status", [400, 499, 600])
def test_server_error_rejects_non_5xx(status):
    with pytest.raises(ValueError):
        server_error_response(status, "x", "y")
