"""
Creates the bootstrap superadmin if none exists.

    python scripts/seed_superadmin.py [username] [password]

Without arguments SUPERADMIN_USERNAME / SUPERADMIN_PASSWORD from the
environment (.env) are used.
"""
import logging
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))

from sqlmodel import Session  # noqa: E402

from app.core.config import get_settings  # noqa: E402
from app.core.database import build_engine, init_db  # noqa: E402
from app.logging import setup_logging  # noqa: E402
from app.services.admins import seed_superadmin  # noqa: E402

log = logging.getLogger("storefront.seed")


def main(argv: list[str]) -> int:
    settings = get_settings()
    username = argv[1] if len(argv) > 1 else settings.superadmin_username
    password = argv[2] if len(argv) > 2 else settings.superadmin_password
    if not password:
        log.error("No password given (argument or SUPERADMIN_PASSWORD).")
        return 1
    engine = build_engine(settings.database_url)
    init_db(engine)
    with Session(engine) as db:
        created = seed_superadmin(db, username, password)
    if created is None:
        log.info("Superadmin already exists.")
    else:
        log.info("Superadmin %r created.", created.username)
    return 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(main(sys.argv))
