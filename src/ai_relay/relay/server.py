"""Launch the relay with uvicorn."""
from __future__ import annotations
import argparse
import dataclasses
import logging

import uvicorn

from ai_relay.common.config import load_settings
from ai_relay.common.logging_setup import setup_logging
from ai_relay.relay.app import create_app

LOGGER = logging.getLogger("airelay.server")

def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Run the AI relay HTTP server")
    ap.add_argument("--config", default=None, help="YAML config path")
    ap.add_argument("--host", default=None)
    ap.add_argument("--port", type=int, default=None)
    ap.add_argument("--log-level", default=None)
    args = ap.parse_args(argv)

    settings = load_settings(args.config)
    overrides = {
        "host": args.host,
        "port": args.port,
        "log_level": args.log_level,
    }
    settings = dataclasses.replace(settings, **{k: v for k, v in overrides.items() if v is not None})

    setup_logging(settings.log_level)
    app = create_app(settings)
    LOGGER.info("Server is running at http://localhost:%s", settings.port)
    # log_config=None keeps uvicorn on the root handler configured above.
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)

if __name__ == "__main__":
    main()
