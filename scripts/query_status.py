"""
Probe a running status service.
Connects once, prints the status line and the service presence state.

Presence states:
- Enabled: a status line was received
- Disabled: nothing is listening on the port
- Error: the service accepted but the reply was missing or malformed
"""

import argparse
import json
import socket
import sys


def query(host: str, port: int, timeout: float) -> str:
    with socket.create_connection((host, port), timeout=timeout) as sock:
        with sock.makefile("r", encoding="utf-8") as reader:
            return reader.readline()


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("host", nargs="?", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=1234)
    parser.add_argument("--timeout", type=float, default=5.0)
    args = parser.parse_args()

    print("=" * 60)
    print(f"Status probe {args.host}:{args.port}")
    print("=" * 60)

    try:
        line = query(args.host, args.port, args.timeout)
    except ConnectionRefusedError:
        print("Presence: Disabled (connection refused)")
        return 1
    except OSError as e:
        print(f"Presence: Error ({e})")
        return 2

    print(f"Raw: {line.rstrip()}")
    try:
        doc = json.loads(line)
        title_id = doc["game_title_id"]
        name = doc["game_name"]
    except (ValueError, KeyError, TypeError) as e:
        print(f"Presence: Error (malformed reply: {e})")
        return 2

    print(f"Title id: {title_id if title_id is not None else '-'}")
    print(f"Name:     {name}")
    print("Presence: Enabled")
    return 0


if __name__ == "__main__":
    sys.exit(main())
