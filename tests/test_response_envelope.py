from fastapi import HTTPException

from core.errors import ConfigurationError, ServerError, ValidationError
from core.response_envelope import error_payload, http_exception_response


def test_error_payload_omits_missing_detail():
    assert error_payload(error="lat,lng required") == {"error": "lat,lng required"}


def test_error_payload_includes_detail():
    payload = error_payload(error="server_error", detail="boom")
    assert payload == {"error": "server_error", "detail": "boom"}


def test_http_exception_response_renders_app_exceptions():
    response = http_exception_response(ValidationError())
    assert response.status_code == 400
    assert response.body == b'{"error":"lat,lng required"}'

    response = http_exception_response(ConfigurationError("GOOGLE_MAPS_API_KEY"))
    assert response.status_code == 500
    assert response.body == b'{"error":"missing_env_GOOGLE_MAPS_API_KEY"}'

    response = http_exception_response(ServerError(detail="timeout"))
    assert response.body == b'{"error":"server_error","detail":"timeout"}'


def test_http_exception_response_handles_plain_http_exceptions():
    response = http_exception_response(HTTPException(status_code=404, detail="Not Found"))
    assert response.status_code == 404
    assert response.body == b'{"error":"Not Found"}'


def test_configuration_error_names_the_missing_setting_in_its_payload():
    exc = ConfigurationError("GOOGLE_MAPS_API_KEY")
    assert exc.detail == {"error": "missing_env_GOOGLE_MAPS_API_KEY"}
