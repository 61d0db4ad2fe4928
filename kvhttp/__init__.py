"""
KV-HTTP: In-Memory Key-Value Store over HTTP

A small in-memory key-value store served with FastAPI, keeping a
request counter and logging a periodic status line.
"""

__version__ = "1.0.0"
