"""
Flask application for the USD-BRL quotation server.

GET /cotacao fetches the current quotation upstream, stores it and returns
its bid price.
"""

import argparse
import logging
import sys
from typing import List, Optional

from flask import Flask, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException
from werkzeug.serving import make_server

from quotation.config.settings import REQUEST_TIMEOUT_HEADER, ServerConfig
from quotation.deadline import Deadline
from quotation.schemas import ErrorResponse, QuotationResponse
from quotation.server.database import QuotationStore
from quotation.server.errors import QuotationError, ResponseEncodeError
from quotation.server.service import QuotationService
from quotation.server.upstream import UpstreamClient
from quotation.utils.durations import format_duration, parse_duration
from quotation.utils.logger import LoggerFactory

logger = LoggerFactory.get_logger(__name__)

REQUEST_TIMEOUT_USAGE = "request timeout usage: -rt 200ms or -rt 1s or -rt 1m"
DATABASE_TIMEOUT_USAGE = "database timeout usage: -dbt 10ms or -dbt 1s"
SERVER_PORT_USAGE = "server port usage: -p 8080 or -p 3000 (range from 0 to 65535)"


def error_response(message: str, status_code: int = 500):
    """Log ``message`` and build the JSON error reply."""
    # 4xx are caller mistakes
    level = logging.WARNING if status_code < 500 else logging.ERROR
    logger.log(level, message)
    body = ErrorResponse(error=message, status_code=status_code)
    return jsonify(body.model_dump()), status_code


def inbound_deadline() -> Deadline:
    """Deadline announced by the caller, or an unbounded one."""
    header = request.headers.get(REQUEST_TIMEOUT_HEADER)
    if not header:
        return Deadline.background()
    try:
        return Deadline.after(parse_duration(header))
    except ValueError:
        logger.warning("Ignoring invalid %s header: %r", REQUEST_TIMEOUT_HEADER, header)
        return Deadline.background()


def create_app(service: QuotationService) -> Flask:
    """Build the Flask application around an already wired service."""
    app = Flask(__name__)

    @app.route("/cotacao", methods=["GET"])
    def get_quotation():
        """
        Fetch, store and relay the current USD-BRL bid.

        Returns:
            200 {"bid": "..."} on success

        Raises:
            500: On upstream, decode, database or encoding failure
        """
        logger.info("GET /cotacao")
        try:
            quotation = service.fetch_and_store(inbound_deadline())
            try:
                body = QuotationResponse(bid=quotation.bid).model_dump()
            except ValidationError as e:
                raise ResponseEncodeError(
                    f"GET /cotacao - failed to send response: {e}"
                ) from e
            return jsonify(body), 200

        except QuotationError as e:
            return error_response(e.message)
        except Exception:
            logger.exception("Unexpected error serving GET /cotacao")
            return error_response("Internal server error")

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return error_response(f"{request.method} {request.path} - {e.name}", e.code or 500)

    return app


def build_app(config: ServerConfig) -> Optional[Flask]:
    """Connect the store and wire the application, or None if the database is unusable."""
    store = QuotationStore(config.database_url)
    if not store.connect():
        return None

    service = QuotationService(config, UpstreamClient(config.upstream_url), store)
    return create_app(service)


def _duration(usage: str):
    def parse(value: str):
        try:
            return parse_duration(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid argument, {usage}")

    return parse


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid argument, {SERVER_PORT_USAGE}")
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"invalid argument, {SERVER_PORT_USAGE}")
    return port


def parse_args(argv: List[str], defaults: ServerConfig) -> ServerConfig:
    """Parse command line arguments on top of the environment configuration."""
    p = argparse.ArgumentParser(description="Serve the USD-BRL bid price")
    p.add_argument(
        "-rt",
        "--request-timeout",
        type=_duration(REQUEST_TIMEOUT_USAGE),
        default=defaults.request_timeout,
        help=REQUEST_TIMEOUT_USAGE,
    )
    p.add_argument(
        "-dbt",
        "--database-timeout",
        type=_duration(DATABASE_TIMEOUT_USAGE),
        default=defaults.database_timeout,
        help=DATABASE_TIMEOUT_USAGE,
    )
    p.add_argument(
        "-p", "--port", type=_port, default=defaults.port, help=SERVER_PORT_USAGE
    )
    p.add_argument("--host", default=defaults.host, help="Address to bind")
    p.add_argument("--database-url", default=defaults.database_url)
    p.add_argument("--log-level", default=defaults.log_level)
    args = p.parse_args(argv)

    return ServerConfig(
        request_timeout=args.request_timeout,
        database_timeout=args.database_timeout,
        host=args.host,
        port=args.port,
        database_url=args.database_url,
        upstream_url=defaults.upstream_url,
        log_level=args.log_level,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Parse flags, bootstrap the database and serve until interrupted."""
    config = parse_args(sys.argv[1:] if argv is None else argv, ServerConfig())
    LoggerFactory.setup_logging(config.log_level, force=True)

    app = build_app(config)
    if app is None:
        logger.critical("Failed to create quotation table")
        return 1

    try:
        server = make_server(config.host, config.port, app, threaded=True)
    except OSError as e:
        logger.critical("*** ERROR ***: %s", e)
        return 1

    logger.info("Starting server on port :%d", config.port)
    logger.info("Request timeout: %s", format_duration(config.request_timeout))
    logger.info("Database timeout: %s", format_duration(config.database_timeout))

    # Returns once interrupted with Ctrl-C
    server.serve_forever()
    logger.info("Server stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
