import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger unless the host process already did."""
    logging.basicConfig(format=LOG_FORMAT, level=level.upper())
