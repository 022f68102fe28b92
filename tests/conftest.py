import json
from datetime import timedelta

import pytest
import requests
from sqlalchemy import select

from quotation.config.settings import UPSTREAM_URL, ServerConfig
from quotation.models import Quotation, quotation_table
from quotation.server.database import QuotationStore

SAMPLE_QUOTATION = {
    "code": "USD",
    "codein": "BRL",
    "name": "Dólar/Real",
    "high": "5.50",
    "low": "5.40",
    "varBid": "0.01",
    "pctChange": "0.18",
    "bid": "5.45",
    "ask": "5.46",
    "timestamp": "1700000000",
    "create_date": "2023-11-14 10:00:00",
}


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_response(status_code=200, body=b"", url=UPSTREAM_URL, reason="OK"):
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.url = url
    response._content = body if isinstance(body, bytes) else json.dumps(body).encode()
    # Served from _content, also when read with stream=True
    response._content_consumed = True
    return response


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstream_body():
    return {"USDBRL": dict(SAMPLE_QUOTATION)}


@pytest.fixture
def server_config(tmp_path):
    return ServerConfig(
        request_timeout=timedelta(milliseconds=200),
        database_timeout=timedelta(seconds=5),
        host="127.0.0.1",
        port=8080,
        database_url=f"sqlite:///{tmp_path / 'cotacao.db'}",
        upstream_url=UPSTREAM_URL,
        log_level="DEBUG",
    )


@pytest.fixture
def store(server_config):
    store = QuotationStore(server_config.database_url)
    assert store.connect()
    yield store
    store.close()


@pytest.fixture
def response_factory():
    return make_response


def read_quotations(engine):
    with engine.connect() as conn:
        rows = conn.execute(select(quotation_table)).fetchall()
    return [Quotation(*row) for row in rows]


@pytest.fixture
def stored_quotations(store):
    """Rows currently in the quotation table, read through ``store``'s engine by default."""

    def read(engine=None):
        return read_quotations(engine or store.engine)

    return read
