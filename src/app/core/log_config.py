import logging

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=_FORMAT)
    # SQLAlchemy engine logging is controlled by echo=; keep it quiet here
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
