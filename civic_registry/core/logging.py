import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("civic_registry").setLevel(level.upper())
