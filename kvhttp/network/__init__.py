"""Network module for KV-HTTP."""

from .http_server import KVHTTPServer, create_app, decode_entries

__all__ = ["KVHTTPServer", "create_app", "decode_entries"]
