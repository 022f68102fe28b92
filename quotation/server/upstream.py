"""
Client for the upstream exchange-rate API.
"""

from datetime import timedelta
from typing import Optional

import requests
from pydantic import ValidationError

from quotation.deadline import Deadline, DeadlineExceeded
from quotation.models import Quotation
from quotation.schemas import UpstreamEnvelope
from quotation.server.errors import (
    QuotationDecodeError,
    UpstreamRequestError,
    UpstreamTimeoutError,
)
from quotation.utils.durations import format_duration
from quotation.utils.logger import LoggerFactory

logger = LoggerFactory.get_logger(__name__)

CHUNK_SIZE = 8192


class UpstreamClient:
    """Fetches the current USD-BRL quotation."""

    def __init__(self, url: str, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            url: Upstream endpoint returning {"USDBRL": {...}}
            session: HTTP session to reuse (a new one if None)
        """
        self.url = url
        self.session = session or requests.Session()

    def fetch(self, deadline: Deadline, timeout: timedelta) -> Quotation:
        """
        Fetch one quotation before ``deadline`` expires.

        Args:
            deadline: Deadline bounding the call
            timeout: Budget the deadline was derived from, used in messages

        Returns:
            The decoded quotation

        Raises:
            UpstreamTimeoutError: If the deadline expires first
            UpstreamRequestError: On any other transport failure or a non-2xx status
            QuotationDecodeError: If the body is not a wrapped quotation
        """
        timeout_message = (
            f"request exceeded the maximum time of {format_duration(timeout)}"
        )

        try:
            logger.debug("Requesting quotation from: %s", self.url)
            response = self.session.get(
                self.url, timeout=_time_left(deadline), stream=True
            )
            try:
                deadline.check()
                response.raise_for_status()
                body = _read_body(response, deadline)
            finally:
                response.close()
        except (DeadlineExceeded, requests.exceptions.Timeout) as e:
            raise UpstreamTimeoutError(timeout_message) from e
        except requests.exceptions.RequestException as e:
            if deadline.expired():
                raise UpstreamTimeoutError(timeout_message) from e
            raise UpstreamRequestError(f"GET /cotacao - request failed: {e}") from e

        try:
            envelope = UpstreamEnvelope.model_validate_json(body)
        except ValidationError as e:
            raise QuotationDecodeError(
                f"GET /cotacao - failed to decode quotation: {e}"
            ) from e

        return envelope.usdbrl.to_model()


def _time_left(deadline: Deadline) -> Optional[float]:
    """Remaining budget usable as a socket timeout."""
    deadline.check()
    remaining = deadline.remaining()
    if remaining is not None and remaining <= 0:
        raise DeadlineExceeded("deadline exceeded")
    return remaining


def _read_body(response: requests.Response, deadline: Deadline) -> bytes:
    # Socket timeouts only bound each read, so the deadline is checked per chunk
    chunks = []
    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
        deadline.check()
        chunks.append(chunk)
    return b"".join(chunks)
