from datetime import timedelta

import pytest
import requests

from quotation.client import main as client_main
from quotation.client.main import (
    OutputWriteError,
    RequestFailedError,
    RequestTimeoutError,
    ResponseDecodeError,
    ServerError,
    append_quotation,
    request_bid,
)
from quotation.config.settings import SERVER_URL, ClientConfig


@pytest.fixture
def config(tmp_path):
    return ClientConfig(
        request_timeout=timedelta(milliseconds=300),
        server_url=SERVER_URL,
        output_file=str(tmp_path / "cotacao.txt"),
        log_level="INFO",
    )


@pytest.fixture
def http_get(mocker):
    return mocker.patch.object(client_main.requests, "get")


def test_request_bid_sends_timeout(config, http_get, response_factory):
    http_get.return_value = response_factory(200, {"bid": "5.45"}, url=SERVER_URL)

    assert request_bid(config) == "5.45"
    http_get.assert_called_once_with(
        SERVER_URL, headers={"X-Request-Timeout": "300ms"}, timeout=0.3
    )


def test_timeout_names_configured_duration(config, http_get):
    http_get.side_effect = requests.exceptions.ReadTimeout("read timed out")

    with pytest.raises(RequestTimeoutError, match="maximum time of 300ms"):
        request_bid(config)


def test_connect_timeout_is_a_timeout(config, http_get):
    http_get.side_effect = requests.exceptions.ConnectTimeout("connect timed out")

    with pytest.raises(RequestTimeoutError):
        request_bid(config)


def test_connection_failure(config, http_get):
    http_get.side_effect = requests.exceptions.ConnectionError("connection refused")

    with pytest.raises(RequestFailedError, match="connection refused"):
        request_bid(config)


def test_server_error_reports_message_and_code(config, http_get, response_factory):
    http_get.return_value = response_factory(
        500,
        {"error": "request exceeded the maximum time of 200ms", "status_code": 500},
        url=SERVER_URL,
    )

    with pytest.raises(ServerError) as excinfo:
        request_bid(config)

    assert excinfo.value.message == "request exceeded the maximum time of 200ms"
    assert excinfo.value.status_code == 500
    assert str(excinfo.value) == (
        "An error occurred: request exceeded the maximum time of 200ms (code: 500)"
    )
    http_get.assert_called_once()


def test_server_error_without_code_uses_http_status(config, http_get, response_factory):
    http_get.return_value = response_factory(503, {"error": "down"}, url=SERVER_URL)

    with pytest.raises(ServerError) as excinfo:
        request_bid(config)

    assert excinfo.value.status_code == 503


@pytest.mark.parametrize("status_code", [200, 500])
def test_undecodable_body(config, http_get, response_factory, status_code):
    http_get.return_value = response_factory(status_code, b"<html>", url=SERVER_URL)

    with pytest.raises(ResponseDecodeError, match="failed to decode response body"):
        request_bid(config)


def test_append_quotation_creates_then_appends(tmp_path):
    path = tmp_path / "cotacao.txt"

    assert append_quotation(str(path), "5.45") == "Dólar: 5.45"
    append_quotation(str(path), "5.46")

    assert path.read_text(encoding="utf-8") == "Dólar: 5.45\nDólar: 5.46\n"


def test_append_quotation_write_failure(tmp_path):
    with pytest.raises(OutputWriteError, match="failed to save quotation to disk"):
        append_quotation(str(tmp_path), "5.45")


def test_main_appends_bid(tmp_path, http_get, response_factory):
    output = tmp_path / "cotacao.txt"
    output.write_text("Dólar: 5.40\n", encoding="utf-8")
    http_get.return_value = response_factory(200, {"bid": "5.45"}, url=SERVER_URL)

    code = client_main.main(["-rt", "1s", "-o", str(output)])

    assert code == 0
    assert output.read_text(encoding="utf-8") == "Dólar: 5.40\nDólar: 5.45\n"
    assert http_get.call_args.kwargs["timeout"] == 1.0


def test_main_fails_on_server_error_without_retry(tmp_path, http_get, response_factory):
    output = tmp_path / "cotacao.txt"
    http_get.return_value = response_factory(
        500, {"error": "boom", "status_code": 500}, url=SERVER_URL
    )

    code = client_main.main(["-o", str(output)])

    assert code == 1
    assert http_get.call_count == 1
    assert not output.exists()


def test_main_rejects_invalid_timeout(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        client_main.main(["-rt", "soon", "-o", str(tmp_path / "cotacao.txt")])

    assert excinfo.value.code == 2


@pytest.mark.parametrize("flags", [["-rt", "0s"], ["--request-timeout=-1s"]])
def test_main_fails_on_spent_timeout_without_request(tmp_path, http_get, flags):
    output = tmp_path / "cotacao.txt"

    code = client_main.main(flags + ["-o", str(output)])

    assert code == 1
    http_get.assert_not_called()
    assert not output.exists()


def test_zero_timeout_names_configured_duration(config, http_get):
    config.request_timeout = timedelta(0)

    with pytest.raises(RequestTimeoutError, match="maximum time of 0s$"):
        request_bid(config)

    http_get.assert_not_called()
