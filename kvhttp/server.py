#!/usr/bin/env python3
"""
KV-HTTP Server Entry Point

This is the main entry point for starting the KV-HTTP server.

Usage:
    python -m kvhttp.server                         # Default settings (0.0.0.0:8080)
    python -m kvhttp.server --port 9090             # Custom port
    python -m kvhttp.server --host 127.0.0.1        # Custom host
    python -m kvhttp.server --report-interval 10    # Status line every 10 seconds
    python -m kvhttp.server --debug                 # Enable debug logging

Environment Variables:
    KV_HTTP_HOST             - Server bind address
    KV_HTTP_PORT             - Server port
    KV_HTTP_REPORT_INTERVAL  - Seconds between status log lines
    KV_HTTP_DEBUG            - Enable debug mode (true/false)
    KV_HTTP_LOG_LEVEL        - Log level when not in debug mode
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config.settings import settings
from .network.http_server import KVHTTPServer
from .store.concurrent import ConcurrentStore


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="KV-HTTP: In-Memory Key-Value Store over HTTP",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=settings.HOST,
        help="Host address to bind to",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help="Port number to listen on",
    )

    parser.add_argument(
        "--report-interval",
        type=float,
        default=settings.REPORT_INTERVAL,
        help="Seconds between status log lines",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the server."""
    args = parse_args(argv)

    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    # One store per process, handed to the server explicitly
    store = ConcurrentStore()
    server = KVHTTPServer(
        host=args.host,
        port=args.port,
        store=store,
        report_interval=args.report_interval,
    )

    logger.info("Starting KV-HTTP server")
    logger.info(f"  Host: {args.host}")
    logger.info(f"  Port: {args.port}")
    logger.info(f"  Report interval: {args.report_interval}s")
    logger.info(f"  Debug: {args.debug}")

    # uvicorn installs its own SIGINT/SIGTERM handlers and drains on exit
    try:
        asyncio.run(server.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    except Exception as e:
        logger.error(f"Server error: {e}")
        raise
    finally:
        stats = store.stats()
        logger.info(
            f"Server shutdown complete ({stats.requests} requests served, "
            f"{stats.data_size} items in database)"
        )


if __name__ == "__main__":
    main()
