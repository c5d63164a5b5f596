"""
Entrypoint: load .env, init logging, then either run one perf test and print
the report (`run`, the default) or serve the HTTP API (`serve`).
"""

import argparse
import asyncio
import sys

import structlog
from dotenv import load_dotenv

from .config import config
from .logging_setup import setup_logging
from .perf_test import run_perf_test

logger = structlog.get_logger(__name__)


def _run_once() -> int:
    try:
        outcome = asyncio.run(run_perf_test())
    except Exception as e:
        logger.error("perf_test_failed", error=str(e), exc_info=True)
        return 1

    print(outcome.to_json(indent=2))
    print(outcome.message)
    return 0


def _serve(host: str, port: int) -> int:
    import uvicorn

    logger.info("starting_server", host=host, port=port)
    uvicorn.run("perftest.server:app", host=host, port=port)
    return 0


def main(argv=None) -> int:
    """Main entry point for the perf test."""
    load_dotenv()
    config.reload()

    parser = argparse.ArgumentParser(description="Compare CDN and S3 media download times")
    parser.add_argument("command", nargs="?", choices=["run", "serve"], default="run")
    parser.add_argument("--host", default=config.server.get('host', '0.0.0.0'))
    parser.add_argument("--port", type=int, default=config.server.get('port', 8001))
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level)

    if args.command == "serve":
        return _serve(args.host, args.port)
    return _run_once()


if __name__ == "__main__":
    sys.exit(main())
