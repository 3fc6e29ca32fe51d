"""Launch the registry API with settings from the environment or the command line."""

from __future__ import annotations

import argparse
import logging

import uvicorn

from registry_api.config import get_api_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
QUIET_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the package registry API.")
    parser.add_argument("--host", default=None, help="Bind address (overrides REGISTRY_API_HOST).")
    parser.add_argument("--port", type=int, default=None, help="Port (overrides REGISTRY_API_PORT).")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes.")
    parser.add_argument(
        "--log-level",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        default=None,
    )
    return parser.parse_args(argv)


def configure_logging(log_level: str) -> None:
    level = logging.DEBUG if log_level == "trace" else getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
    # The AWS SDK logs every request at INFO/DEBUG.
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = get_api_settings()
    log_level = (args.log_level or settings.log_level).lower()
    configure_logging(log_level)

    uvicorn.run(
        "registry_api.app:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload or settings.reload,
        log_level="debug" if log_level == "trace" else log_level,
        log_config=None,
    )


if __name__ == "__main__":
    main()
