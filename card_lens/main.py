"""Main entry point for Card Lens."""

import logging
import sys

import uvicorn

from card_lens.config import ConfigLoader, ConfigLoadError, SystemConfig

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(debug: bool = False) -> None:
    """Log to stdout; debug mode only raises the card_lens loggers to DEBUG."""
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True
    )
    logging.getLogger('card_lens').setLevel(logging.DEBUG if debug else logging.INFO)
    logging.getLogger('python_multipart').setLevel(logging.WARNING)


def main():
    """Run the FastAPI server."""
    try:
        system_config = ConfigLoader().load_system_config()
    except ConfigLoadError as e:
        setup_logging()
        logging.getLogger(__name__).warning(f"Could not load system config: {e}, using defaults")
        system_config = SystemConfig()
    else:
        setup_logging(debug=system_config.debug)

    logger = logging.getLogger(__name__)
    logger.info(f"Starting Card Lens on {system_config.api_host}:{system_config.api_port}")

    uvicorn.run(
        "card_lens.api.app:app",
        host=system_config.api_host,
        port=system_config.api_port,
        log_level="debug" if system_config.debug else "info",
        log_config=None,  # Keep our basicConfig
    )


if __name__ == "__main__":
    main()
