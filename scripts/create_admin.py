"""Create an administrator account directly against the configured database.

No HTTP operation can create or promote an administrator, so the first one is
provisioned with this script::

    python scripts/create_admin.py --full-name "Root" --birth-date 1980-01-01 \
        --email admin@example.com --password change-me
"""

from __future__ import annotations

import argparse
import logging
import sys

from psycopg_pool import ConnectionPool

from account_service.config import get_settings
from account_service.domain.account import Role
from account_service.domain.errors import AccountServiceError
from account_service.domain.service import AccountService
from account_service.repository import AccountRepository

logger = logging.getLogger("create_admin")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--full-name", required=True)
    parser.add_argument("--birth-date", required=True, help="ISO-8601 date, e.g. 1980-01-01")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    return parser.parse_args(argv)


def create_admin(service: AccountService, args: argparse.Namespace) -> int:
    try:
        account = service.register(
            args.full_name,
            args.birth_date,
            args.email,
            args.password,
            role=Role.ADMIN,
        )
    except AccountServiceError as exc:
        logger.error("could not create admin: %s", exc.message)
        return 1
    logger.info("created admin account id=%s email=%s", account.id, account.email)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(message)s")

    with ConnectionPool(settings.database_url) as pool:
        repository = AccountRepository(pool)
        repository.ensure_schema()
        return create_admin(AccountService(repository), args)


if __name__ == "__main__":
    sys.exit(main())
