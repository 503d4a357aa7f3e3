# app/backend/manage.py
"""
Admin commands.

    python -m app.backend.manage init-db
    python -m app.backend.manage create-user alice alice@example.com --display-name Alice
"""
from __future__ import annotations

import argparse
import getpass
import logging
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="app.backend.manage")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create missing tables")

    cu = sub.add_parser("create-user", help="add a user to the identity store")
    cu.add_argument("username")
    cu.add_argument("email")
    cu.add_argument("--display-name", default=None)
    cu.add_argument("--password", default=None, help="prompted when omitted")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()

    from app.backend.core.config import get_settings
    from app.backend.core.logging_config import setup_logging
    from app.backend.services.user_service import create_user, get_user_by_login
    from app.db.session import create_all_tables, session_scope

    setup_logging(get_settings().log_level)
    args = _build_parser().parse_args(argv)

    create_all_tables()
    if args.command == "init-db":
        logger.info("tables ensured")
        return 0

    password = args.password or getpass.getpass("Password: ")
    if not password:
        logger.error("password must not be empty")
        return 2

    with session_scope() as db:
        if get_user_by_login(db, args.username) or get_user_by_login(db, args.email):
            logger.error("user already exists: %s", args.username)
            return 1
        user = create_user(
            db,
            username=args.username,
            email=args.email,
            password=password,
            display_name=args.display_name,
        )
        print(f"created user id={user.id} username={user.username}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
