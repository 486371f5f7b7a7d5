"""Drop and recreate the bookings table on the local SQLite database."""
import argparse
import logging
import pathlib
import sys

from sqlalchemy.exc import SQLAlchemyError

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import database  # noqa: E402
from app import models  # noqa: E402

logger = logging.getLogger("reset_local_db")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--yes", action="store_true", help="Do not ask before deleting existing bookings")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")

    # Never touch a shared MySQL database from this script.
    if database.engine.dialect.name != "sqlite":
        logger.warning("Not resetting: %s is not a SQLite database", database.engine.url.get_backend_name())
        return 0

    db_file = database.engine.url.database or ":memory:"
    if not args.yes:
        answer = input(f"Delete every booking in {db_file}? [y/N] ")
        if answer.strip().lower() != "y":
            logger.info("Reset cancelled")
            return 0

    table = models.SevaBooking.__table__
    try:
        models.Base.metadata.drop_all(bind=database.engine, tables=[table])
        models.Base.metadata.create_all(bind=database.engine, tables=[table])
    except SQLAlchemyError as exc:
        logger.error("Could not recreate %s in %s: %s", table.name, db_file, exc)
        return 1
    finally:
        database.engine.dispose()

    logger.info("Recreated %s in %s", table.name, db_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
