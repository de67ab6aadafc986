"""Launch the image generation proxy with uvicorn."""
from __future__ import annotations
import argparse
import logging
import os
import sys

import uvicorn

from imagegen_proxy.common.errors import ConfigurationError
from imagegen_proxy.common.logging_setup import setup_logging
from imagegen_proxy.serve.fastapi_app import create_app

LOGGER = logging.getLogger("imagegen_proxy.serve.run")


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Run the FAL.ai image generation proxy")
    ap.add_argument("--config", default=os.getenv("FAL_CONFIG"), help="YAML config with a 'fal' section")
    ap.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    ap.add_argument("--port", type=int, default=int(os.getenv("PORT", "8080")))
    ap.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"))
    args = ap.parse_args(argv)

    setup_logging(args.log_level)
    try:
        app = create_app(cfg_path=args.config)
    except ConfigurationError as e:
        LOGGER.error("Cannot start: %s", e)
        return 1

    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
