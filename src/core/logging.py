"""Logging configuration for DeckSmith."""
import logging
import sys

NOISY_LOGGERS = ("azure.core.pipeline", "azure.identity", "azure.monitor", "httpx", "openai")


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure application logging.

    Library loggers that chatter at INFO are held at WARNING unless the
    requested level is DEBUG.

    Args:
        level: Logging level (default: INFO)
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
