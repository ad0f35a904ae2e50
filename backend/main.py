import uvicorn
import sys
import logging
from pathlib import Path

from tutor.config import Settings, get_settings


# Configure logging
def configure_logging(settings: Settings):
    log_dir = Path(settings.log_dir) if settings.log_dir else None
    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "backend.log" if log_dir else "backend.log"

    logging.basicConfig(
        level=settings.log_level,
        format="[{asctime}] [{levelname}] {name}: {message}",
        style="{",
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stdout),  # Also log to console
        ],
    )
    # Suppress uvicorn access logs to avoid duplication with stdout
    logging.getLogger("uvicorn.access").handlers = []
    logging.getLogger("uvicorn.access").propagate = False


if __name__ == "__main__":
    settings = get_settings()
    configure_logging(settings)
    logger = logging.getLogger("backend")
    logger.info("Starting backend application...")

    uvicorn.run(
        "tutor.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
