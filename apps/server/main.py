import argparse
import logging
import signal
import socket
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from packages.core.logging_ import setup_logging
from packages.core.platform.factory import build_platform
from packages.core.server.accept_loop import StatusServer
from packages.core.status.backend import BackendSelectionError, select_backend
from packages.core.status.resolver import ForegroundResolver
from packages.core.status.service import StatusService
from packages.shared.config import ServiceConfig
from packages.shared.store import ConfigStore

log = logging.getLogger("presence_beacon")


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="presence-beacon",
        description="Answer each TCP connection with the console's current foreground title.",
    )
    parser.add_argument("--config", type=Path, default=None, help="config file (default: app data dir)")
    parser.add_argument("--port", type=int, default=None, help="override the configured port")
    return parser.parse_args(argv)


def _install_signal_handlers(listener: socket.socket) -> None:
    # Closing the listener ends the accept loop.
    def signal_handler(sig, frame):
        log.info("Received signal %s, shutting down", sig)
        listener.close()

    signal.signal(signal.SIGINT, signal_handler)
    if hasattr(signal, 'SIGTERM'):
        signal.signal(signal.SIGTERM, signal_handler)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    store = ConfigStore(args.config)
    cfg = store.load()

    setup_logging(cfg)
    log.info("Starting status service (config %s)", store.path())

    if args.port is not None:
        try:
            cfg = ServiceConfig.model_validate({**cfg.model_dump(), "port": args.port})
        except ValidationError as e:
            log.critical("Invalid --port %d: %s", args.port, e)
            return 1

    platform = build_platform(cfg)
    try:
        backend = select_backend(platform)
    except BackendSelectionError as e:
        log.critical("%s", e)
        return 1

    service = StatusService(backend, ForegroundResolver(platform, cfg.max_name_length))
    server = StatusServer(
        service,
        host=cfg.listen_host,
        port=cfg.port,
        backlog=cfg.backlog,
        send_timeout=cfg.send_timeout_seconds,
    )

    try:
        listener = server.open()
    except OSError as e:
        log.critical("Failed to bind %s:%d: %s", cfg.listen_host, cfg.port, e)
        return 1

    with listener:
        _install_signal_handlers(listener)
        server.serve_forever(listener)
    return 0


if __name__ == "__main__":
    sys.exit(main())
