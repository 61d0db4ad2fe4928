"""
HTTP Server Module

This module exposes a ConcurrentStore over HTTP with FastAPI and runs it
under uvicorn.

Routes:
- POST   /data        Upsert a JSON object of string pairs    (201 / 400 / 413)
- GET    /data        Snapshot of every pair as a JSON object (200)
- DELETE /data/{key}  Remove one key                          (200 / 404)
- GET    /stats       {"requests": N, "data_size": M}          (200)

Request bodies are read and decoded before the store lock is taken.
Every store call runs on FastAPI's worker thread pool (the plain-function
endpoints implicitly, the write endpoint through run_in_threadpool), so the
event loop never blocks on the store's lock.
"""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from ..config.settings import settings
from ..store.concurrent import ConcurrentStore
from ..store.reporter import StatusReporter

logger = logging.getLogger(__name__)


def decode_entries(raw: bytes) -> Dict[str, str]:
    """
    Decode a POST /data body into a mapping of string keys to string values.

    Args:
        raw: The raw request body

    Returns:
        The decoded mapping (possibly empty)

    Raises:
        ValueError: If the body is not valid JSON, is not a JSON object,
            or holds a non-string value
    """
    try:
        body = json.loads(raw)
    except RecursionError:
        raise ValueError("JSON nested too deeply") from None
    if not isinstance(body, dict):
        raise ValueError(f"expected a JSON object, got {type(body).__name__}")
    for key, value in body.items():
        if not isinstance(value, str):
            raise ValueError(f"value for {key!r} is not a string")
    return body


def create_app(store: ConcurrentStore, reporter: Optional[StatusReporter] = None) -> FastAPI:
    """
    Build the FastAPI application around an explicitly constructed store.

    Args:
        store: The store shared by every request handler
        reporter: Status reporter started and stopped with the app's
            lifespan (a default one is built for the store if not provided)

    Returns:
        The configured FastAPI application
    """
    reporter = reporter if reporter is not None else StatusReporter(store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        reporter.start()
        try:
            yield
        finally:
            await reporter.stop()

    app = FastAPI(
        title="kv-http",
        description="In-Memory Key-Value Store",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.reporter = reporter

    @app.middleware("http")
    async def request_size_limit(request: Request, call_next):
        if request.headers.get("content-length"):
            try:
                content_length = int(request.headers["content-length"])
            except ValueError:
                return JSONResponse(
                    status_code=400,
                    content={"detail": "Invalid Content-Length"},
                )
            if content_length > settings.MAX_BODY_SIZE:
                return JSONResponse(
                    status_code=413,
                    content={"detail": "Request entity too large"},
                )
        return await call_next(request)

    @app.post("/data", status_code=201)
    async def put_data(request: Request) -> Response:
        # Chunked bodies carry no Content-Length, so the limit is enforced here too
        raw = bytearray()
        async for chunk in request.stream():
            raw.extend(chunk)
            if len(raw) > settings.MAX_BODY_SIZE:
                logger.debug("Rejected POST /data body over size limit")
                raise HTTPException(status_code=413, detail="Request entity too large")

        try:
            entries = decode_entries(bytes(raw))
        except ValueError as exc:
            logger.debug(f"Rejected POST /data body: {exc}")
            raise HTTPException(status_code=400, detail="Invalid JSON")

        await run_in_threadpool(store.put_many, entries)
        return Response(status_code=201)

    @app.get("/data")
    def get_data() -> Dict[str, str]:
        return store.get_all()

    @app.delete("/data/{key:path}")
    def delete_data(key: str) -> Dict[str, Any]:
        if not store.delete(key):
            logger.debug(f"DELETE of missing key {key!r}")
            raise HTTPException(status_code=404, detail="Key not found")
        return {"deleted": key}

    @app.get("/stats")
    def get_stats() -> Dict[str, int]:
        return store.stats().to_dict()

    return app


class KVHTTPServer:
    """
    uvicorn-backed HTTP server for the KV-HTTP service.

    Usage:
        server = KVHTTPServer(host='0.0.0.0', port=8080)
        await server.start()  # Runs until stop() or a signal

    Attributes:
        host: Server bind address (e.g., '0.0.0.0')
        port: Server port number (e.g., 8080)
        store: The ConcurrentStore shared by all requests
        reporter: The StatusReporter tied to the app's lifespan
        app: The FastAPI application
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            store: ConcurrentStore = None,
            report_interval: float = None,
    ):
        """
        Initialize the server.

        Args:
            host: Bind address (default from settings)
            port: Port number (default from settings)
            store: ConcurrentStore instance (creates new one if not provided)
            report_interval: Seconds between status lines (default from settings)
        """
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT
        self.store = store if store is not None else ConcurrentStore()
        self.reporter = StatusReporter(self.store, interval=report_interval)
        self.app = create_app(self.store, self.reporter)

        self._server: Optional[uvicorn.Server] = None

    async def start(self) -> None:
        """
        Serve the app until stop() is called or the process is signalled.

        Example:
            server = KVHTTPServer(port=8080)
            asyncio.run(server.start())
        """
        if self._server is not None:
            return

        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_config=None,
            log_level=settings.LOG_LEVEL.lower(),
        )
        self._server = uvicorn.Server(config)
        logger.info(f"Serving on http://{self.host}:{self.port}")

        try:
            await self._server.serve()
        except asyncio.CancelledError:
            logger.debug("Server start cancelled")
        finally:
            self._server = None

    async def wait_started(self, timeout: float = 5.0) -> None:
        """Wait until uvicorn has bound its socket and finished startup."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while self._server is None or not self._server.started:
            if loop.time() > deadline:
                raise TimeoutError(f"server did not start within {timeout}s")
            await asyncio.sleep(0.01)

    async def stop(self) -> None:
        """Ask uvicorn to exit; start() returns once shutdown is complete."""
        if self._server is None:
            return
        self._server.should_exit = True

    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._server is not None and self._server.started
