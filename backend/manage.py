import os
import sys
import time

import dj_database_url
import psycopg
from psycopg import sql

from dotenv import load_dotenv


DB_COMMANDS = {"migrate", "runserver", "create_admin"}
CONNECT_RETRIES = 5


def _use_sqlite() -> bool:
    flag = os.environ.get("USE_SQLITE", "").strip().lower() in {"1", "true", "yes", "on"}
    return flag or not os.environ.get("DATABASE_URL")


def _postgres_target():
    """Return (database name, maintenance connection kwargs), or None when there is nothing to create."""
    try:
        config = dj_database_url.parse(os.environ["DATABASE_URL"])
    except ValueError as exc:
        print(f"DATABASE_URL is not usable ({exc}), not creating the database.", file=sys.stderr)
        return None
    if "postgresql" not in (config.get("ENGINE") or "").lower() or not config.get("NAME"):
        return None
    params = {
        "host": config.get("HOST"),
        "port": config.get("PORT"),
        "user": config.get("USER"),
        "password": config.get("PASSWORD"),
        "dbname": os.environ.get("PG_MAINTENANCE_DB", "postgres"),
    }
    return config["NAME"], {key: value for key, value in params.items() if value}


def _create_database(name: str, params: dict) -> None:
    with psycopg.connect(**params, autocommit=True) as conn:
        exists = conn.execute("SELECT 1 FROM pg_database WHERE datname = %s", (name,)).fetchone()
        if exists:
            return
        conn.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(name)))
        print(f"Database '{name}' created.")


def _ensure_postgres_database() -> None:
    """Create the PostgreSQL database from DATABASE_URL when it is missing."""
    if _use_sqlite():
        return
    target = _postgres_target()
    if target is None:
        return
    name, params = target

    for attempt in range(1, CONNECT_RETRIES + 1):
        try:
            _create_database(name, params)
            return
        except psycopg.errors.DuplicateDatabase:
            return
        except psycopg.OperationalError as exc:
            if attempt == CONNECT_RETRIES:
                print(f"Could not reach PostgreSQL to create '{name}': {exc}", file=sys.stderr)
                return
            time.sleep(attempt)


def main() -> None:
    """Run administrative tasks."""
    load_dotenv()
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings")

    if len(sys.argv) >= 2 and sys.argv[1] in DB_COMMANDS:
        _ensure_postgres_database()

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
