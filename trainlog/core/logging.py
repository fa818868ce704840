import logging

from trainlog.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # keep request-level SQL out of the app log unless SQL_ECHO asks for it
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
