import pytest
import requests

from cardio_risk.client.gateway import RequestGateway
from cardio_risk.errors import NetworkError, ServiceError

from conftest import BASE_URL, FakeSession, make_response


def _gateway(*outcomes, token=None, timeout=None):
    session = FakeSession(*outcomes)
    gateway = RequestGateway(BASE_URL, token_provider=lambda: token, session=session, timeout=timeout)
    return gateway, session


def test_posts_json_and_returns_body():
    gateway, session = _gateway(make_response(200, {"risk": 1}))

    assert gateway.post("/predict", {"age": 60}) == {"risk": 1}

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == f"{BASE_URL}/predict"
    assert call["json"] == {"age": 60}
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["headers"]["Accept"] == "application/json"


def test_bearer_token_attached_when_available():
    gateway, session = _gateway(make_response(200, {}), token="abc123")
    gateway.send("/me")

    assert session.calls[0]["headers"]["Authorization"] == "Bearer abc123"


def test_no_authorization_header_without_token():
    gateway, session = _gateway(make_response(200, {}))
    gateway.send("/me")

    assert "Authorization" not in session.calls[0]["headers"]


def test_trailing_slash_in_base_url():
    session = FakeSession(make_response(200, {}))
    RequestGateway(BASE_URL + "/", session=session).send("/predict")

    assert session.calls[0]["url"] == f"{BASE_URL}/predict"


def test_timeout_is_forwarded():
    gateway, session = _gateway(make_response(200, {}), timeout=5.0)
    gateway.send("/predict")

    assert session.calls[0]["timeout"] == 5.0


def test_service_error_uses_message_and_code():
    gateway, _ = _gateway(make_response(400, {"message": "Bad input", "code": "VALIDATION"}))

    with pytest.raises(ServiceError) as exc_info:
        gateway.post("/predict", {})

    error = exc_info.value
    assert error.message == "Bad input"
    assert error.code == "VALIDATION"
    assert error.status_code == 400


def test_service_error_falls_back_to_detail():
    gateway, _ = _gateway(make_response(503, {"detail": "Model not loaded."}))

    with pytest.raises(ServiceError) as exc_info:
        gateway.post("/predict", {})

    assert exc_info.value.message == "Model not loaded."
    assert exc_info.value.code == "UNKNOWN_ERROR"
    assert exc_info.value.status_code == 503


def test_service_error_with_unparseable_body():
    gateway, _ = _gateway(make_response(500, text="<html>Internal Server Error</html>"))

    with pytest.raises(ServiceError) as exc_info:
        gateway.post("/predict", {})

    assert exc_info.value.message == "Request failed"
    assert exc_info.value.code == "UNKNOWN_ERROR"
    assert exc_info.value.status_code == 500


def test_validation_detail_list_is_stringified():
    detail = [{"loc": ["body", "age"], "msg": "field required"}]
    gateway, _ = _gateway(make_response(422, {"detail": detail}))

    with pytest.raises(ServiceError) as exc_info:
        gateway.post("/predict", {})

    assert "field required" in exc_info.value.message


def test_connection_failure_is_network_error():
    gateway, _ = _gateway(requests.ConnectionError("Name or service not known"))

    with pytest.raises(NetworkError, match="Unable to reach the server"):
        gateway.post("/predict", {})


def test_timeout_is_network_error():
    gateway, _ = _gateway(requests.ReadTimeout("read timed out"))

    with pytest.raises(NetworkError, match="timed out"):
        gateway.post("/predict", {})


def test_non_json_success_body_is_service_error():
    gateway, _ = _gateway(make_response(200, text="OK"))

    with pytest.raises(ServiceError) as exc_info:
        gateway.post("/predict", {})

    assert exc_info.value.code == "INVALID_RESPONSE"


def test_single_attempt_per_call():
    gateway, session = _gateway(requests.ConnectionError("refused"), make_response(200, {"risk": 0}))

    with pytest.raises(NetworkError):
        gateway.post("/predict", {})

    assert len(session.calls) == 1


def test_numeric_error_code_is_stringified():
    gateway, _ = _gateway(make_response(400, {"message": "bad", "code": 1001}))

    with pytest.raises(ServiceError) as exc_info:
        gateway.post("/predict", {})

    assert exc_info.value.code == "1001"
    assert exc_info.value.message == "bad"


def test_close_releases_owned_session(monkeypatch):
    gateway = RequestGateway(BASE_URL)
    closed = []
    monkeypatch.setattr(gateway.session, "close", lambda: closed.append(True))

    with gateway:
        pass

    assert closed == [True]


def test_close_leaves_injected_session_open():
    gateway, session = _gateway()

    gateway.close()

    assert session.closed is False
