#!/usr/bin/env python3
"""
Interactive Test Client for KV-HTTP

A simple command-line client for manually testing the KV-HTTP server.

Usage:
    python scripts/client.py                  # Talk to localhost:8080
    python scripts/client.py --host 1.2.3.4   # Talk to a specific host
    python scripts/client.py --port 9090      # Talk to a specific port

Commands:
    PUT <key> <value> [<key> <value> ...]  - Store one or more pairs in one request
    GET                                    - Fetch every pair
    DELETE <key>                           - Delete a key
    STATS                                  - Show request count and item count
    help                                   - Show this help
    exit                                   - Exit client
"""

import argparse
import json
import sys

import httpx

# Enable command history with arrow keys (works on Unix systems)
try:
    import readline
except ImportError:
    pass  # readline not available on Windows by default


class KVHTTPClient:
    """Simple HTTP client for KV-HTTP."""

    def __init__(self, host: str, port: int, timeout: float = 5.0):
        self.base_url = f"http://{host}:{port}"
        self.http = httpx.Client(base_url=self.base_url, timeout=timeout)

    def close(self):
        self.http.close()

    def put(self, entries: dict) -> str:
        response = self.http.post("/data", json=entries)
        if response.status_code == 201:
            return f"OK stored {len(entries)}"
        return f"ERROR {response.status_code}: {response.json()['detail']}"

    def get_all(self) -> str:
        response = self.http.get("/data")
        return json.dumps(response.json(), indent=2, sort_keys=True)

    def delete(self, key: str) -> str:
        response = self.http.delete(f"/data/{key}")
        if response.status_code == 200:
            return "OK deleted"
        return f"ERROR {response.status_code}: {response.json()['detail']}"

    def stats(self) -> str:
        stats = self.http.get("/stats").json()
        return f"{stats['requests']} requests, {stats['data_size']} items in database"

    def send_command(self, command: str) -> str:
        """Run one command line against the server."""
        parts = command.split()
        name, args = parts[0].upper(), parts[1:]

        try:
            if name == "PUT":
                if not args or len(args) % 2:
                    return "ERROR usage: PUT <key> <value> [<key> <value> ...]"
                return self.put(dict(zip(args[::2], args[1::2])))
            if name == "GET" and not args:
                return self.get_all()
            if name == "DELETE" and len(args) == 1:
                return self.delete(args[0])
            if name == "STATS" and not args:
                return self.stats()
        except httpx.TimeoutException:
            return "ERROR: Request timed out"
        except httpx.HTTPError as e:
            return f"ERROR: {e}"

        return "ERROR invalid command (type 'help')"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def print_help():
    """Print help message."""
    print("""
KV-HTTP Commands:
-----------------
  PUT <key> <value> [...]   Store pairs (all pairs go in one atomic request)
  GET                       Show every stored pair
  DELETE <key>              Delete a key-value pair
  STATS                     Show request and item counts

Client Commands:
----------------
  help                      Show this help message
  exit                      Exit the client

Examples:
---------
  PUT a 1 b 2               Store "a"="1" and "b"="2" together
  GET                       Print the whole store as JSON
  DELETE a                  Delete "a"
""")


def main():
    parser = argparse.ArgumentParser(
        description="Interactive test client for KV-HTTP"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="localhost",
        help="Server host (default: localhost)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Server port (default: 8080)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=5.0,
        help="Request timeout in seconds (default: 5.0)"
    )

    args = parser.parse_args()

    print(f"KV-HTTP Client")
    print(f"==============")

    with KVHTTPClient(args.host, args.port, args.timeout) as client:
        try:
            client.http.get("/stats")
        except httpx.HTTPError:
            print(f"Cannot reach {client.base_url}. Is the server running?")
            print(f"  Try: python -m kvhttp.server --port {args.port}")
            sys.exit(1)

        print(f"Talking to {client.base_url}. Type 'help' for commands.\n")

        try:
            while True:
                try:
                    command = input(">>> ").strip()
                except EOFError:
                    print("\nGoodbye!")
                    break

                if not command:
                    continue

                lower_cmd = command.lower()
                if lower_cmd == "help":
                    print_help()
                    continue
                if lower_cmd in ("exit", "quit"):
                    print("Goodbye!")
                    break

                print(client.send_command(command))

        except KeyboardInterrupt:
            print("\n\nInterrupted. Goodbye!")


if __name__ == "__main__":
    main()
