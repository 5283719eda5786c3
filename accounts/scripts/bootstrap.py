# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Database bootstrap helper."""

from __future__ import annotations

import argparse

from accounts.infrastructure.container import Container
from accounts.shared.config import DatabaseConfig, load_config
from accounts.shared.logging import setup_logging


def init_database(container: Container) -> int:
    inserted = container.init_database()
    print(f"Schema ready, inserted {inserted} user type(s)")
    return inserted


def seed_admin(container: Container) -> bool:
    init_database(container)
    user_id = container.account_service.ensure_admin_seeded()
    if user_id is None:
        print("Admin account already present, nothing to do")
        return False
    print(f"Created admin account {user_id}")
    return True


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Prepare the accounts database")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Override DATABASE_URL",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("init-db", help="Create tables and user types")
    sub.add_parser("seed-admin", help="Create tables and seed the admin from ADMIN_* settings")
    args = parser.parse_args(argv)

    config = load_config()
    if args.database_url:
        config = config.model_copy(update={"database": DatabaseConfig(url=args.database_url)})
    container = Container(config)
    setup_logging(container.config.log_level, debug_mode=container.config.debug_logging)

    if args.command == "init-db":
        init_database(container)
    else:
        seed_admin(container)


if __name__ == "__main__":
    main()
