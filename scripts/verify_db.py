"""
Connectivity check for the configured database.

Creates any missing tables, then prints row counts per business table and
the current value of every sequential-id counter. Exits non-zero on failure.
"""
import os
import sys

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

sys.path.append(os.getcwd())

from jingjai.db.session import engine, init_db
from jingjai.models import Booking, Client, Counter, InventoryItem, Resource, Sale, UniqueKey, User

TABLES = (User, Client, InventoryItem, Sale, Resource, Booking, UniqueKey)


def verify_database() -> None:
    print(f"Checking {engine.url.render_as_string(hide_password=True)}")
    try:
        init_db()
        with Session(engine) as session:
            for model in TABLES:
                count = session.exec(select(func.count()).select_from(model)).one()
                print(f"  {model.__tablename__:<16} {count} rows")
            for counter in session.exec(select(Counter)).all():
                print(f"  counter {counter.name}: {counter.current_value}")
    except SQLAlchemyError as exc:
        print(f"FAILED: {exc}")
        sys.exit(1)
    print("OK")


if __name__ == "__main__":
    verify_database()
