"""Launch the relay under uvicorn."""
from __future__ import annotations
import logging

import uvicorn

from hookgen.common.logging_setup import setup_logging
from hookgen.common.settings import load_settings

LOGGER = logging.getLogger("hookgen.serve.server")

def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    LOGGER.info("Serving on %s:%s (model=%s)", settings.host, settings.port, settings.model)
    uvicorn.run(
        "hookgen.serve.fastapi_app:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )

if __name__ == "__main__":
    main()
