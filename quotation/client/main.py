"""
Command-line client: asks the quotation server for the USD-BRL bid and
appends it to a local file.
"""

import argparse
import sys
from typing import List, Optional

import requests
from pydantic import ValidationError

from quotation.config.settings import REQUEST_TIMEOUT_HEADER, ClientConfig
from quotation.schemas import ErrorResponse, QuotationResponse
from quotation.utils.durations import format_duration, parse_duration
from quotation.utils.logger import LoggerFactory

logger = LoggerFactory.get_logger(__name__)

REQUEST_TIMEOUT_USAGE = "request timeout usage: -rt 300ms or -rt 1s or -rt 1m"
LINE_LABEL = "Dólar: "


class ClientError(Exception):
    """Fatal failure of the client run."""


class RequestTimeoutError(ClientError):
    pass


class RequestFailedError(ClientError):
    pass


class ResponseDecodeError(ClientError):
    pass


class ServerError(ClientError):
    """The server answered with an error payload."""

    def __init__(self, message: str, status_code: int):
        super().__init__(f"An error occurred: {message} (code: {status_code})")
        self.message = message
        self.status_code = status_code


class OutputWriteError(ClientError):
    pass


def request_bid(config: ClientConfig) -> str:
    """
    Perform the single request to the server.

    Returns:
        The bid relayed by the server

    Raises:
        ClientError: On timeout, transport failure, bad body or error status
    """
    timeout = config.request_timeout.total_seconds()
    headers = {REQUEST_TIMEOUT_HEADER: format_duration(config.request_timeout)}
    timeout_message = (
        f"request exceeded the maximum time of {format_duration(config.request_timeout)}"
    )

    if timeout <= 0:
        raise RequestTimeoutError(timeout_message)

    try:
        response = requests.get(config.server_url, headers=headers, timeout=timeout)
    except requests.exceptions.Timeout as e:
        raise RequestTimeoutError(timeout_message) from e
    except requests.exceptions.RequestException as e:
        raise RequestFailedError(f"request failed: {e}") from e

    if response.status_code == 200:
        try:
            return QuotationResponse.model_validate_json(response.content).bid
        except ValidationError as e:
            raise ResponseDecodeError(f"failed to decode response body: {e}") from e

    try:
        error = ErrorResponse.model_validate_json(response.content)
    except ValidationError as e:
        raise ResponseDecodeError(f"failed to decode response body: {e}") from e

    status_code = error.status_code if error.status_code is not None else response.status_code
    raise ServerError(error.error, status_code)


def append_quotation(path: str, bid: str) -> str:
    """
    Append one "Dólar: <bid>" line to ``path``, creating the file if needed.

    Returns:
        The line written, without the newline
    """
    line = f"{LINE_LABEL}{bid}"
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
    except OSError as e:
        raise OutputWriteError(f"failed to save quotation to disk: {e}") from e
    return line


def run(config: ClientConfig) -> None:
    bid = request_bid(config)
    line = append_quotation(config.output_file, bid)
    logger.info("Record saved to disk. %s", line)


def _duration(value: str):
    try:
        return parse_duration(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid argument, {REQUEST_TIMEOUT_USAGE}")


def parse_args(argv: List[str], defaults: ClientConfig) -> ClientConfig:
    """Parse command line arguments."""
    p = argparse.ArgumentParser(
        description="Fetch the USD-BRL bid from the quotation server"
    )
    p.add_argument(
        "-rt",
        "--request-timeout",
        type=_duration,
        default=defaults.request_timeout,
        help=REQUEST_TIMEOUT_USAGE,
    )
    p.add_argument("--url", default=defaults.server_url, help="Quotation server URL")
    p.add_argument(
        "-o", "--output", default=defaults.output_file, help="File to append to"
    )
    p.add_argument("--log-level", default=defaults.log_level)
    args = p.parse_args(argv)

    return ClientConfig(
        request_timeout=args.request_timeout,
        server_url=args.url,
        output_file=args.output,
        log_level=args.log_level,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Run one request; any failure ends the process with status 1."""
    config = parse_args(sys.argv[1:] if argv is None else argv, ClientConfig())
    LoggerFactory.setup_logging(config.log_level, force=True)

    try:
        run(config)
    except ClientError as e:
        logger.critical("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
