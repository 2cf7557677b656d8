"""Create the Webnode tables on the configured database.

Run with ``python -m app.init_db``. ``--reset`` drops every table first.
"""
import logging
import sys

from app.database import Base, engine
import app.models  # noqa: F401  registers every model on Base.metadata

logger = logging.getLogger(__name__)


def main(reset: bool = False) -> None:
    if reset:
        Base.metadata.drop_all(bind=engine)
        logger.warning(f"Dropped all tables on {engine.url.render_as_string(hide_password=True)}")
    Base.metadata.create_all(bind=engine)
    print(f"✅ Tables ready: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main(reset="--reset" in sys.argv[1:])
