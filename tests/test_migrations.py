import importlib.util
import pathlib
from datetime import date

import pytest
import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy.exc import IntegrityError

ROOT = pathlib.Path(__file__).resolve().parents[1]
MIGRATION_PATH = ROOT / "alembic" / "versions" / "0001_create_bookings.py"


def _load_migration():
    module_spec = importlib.util.spec_from_file_location("create_bookings_migration", MIGRATION_PATH)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


def _upgrade(engine: sa.Engine) -> None:
    migration = _load_migration()
    with engine.begin() as conn:
        ctx = MigrationContext.configure(conn)
        with Operations.context(ctx):
            migration.upgrade()


def _legacy_bookings_table(metadata: sa.MetaData) -> sa.Table:
    table = sa.Table(
        "bookings",
        metadata,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("sevakartha_name", sa.String(255), nullable=False),
        sa.Column("department", sa.String(255), nullable=False),
        sa.Column("seva_type", sa.String(255), nullable=False),
        sa.Column("pooja_date", sa.Date(), nullable=False),
        sa.Column("day", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    sa.Index("ix_bookings_pooja_date", table.c.pooja_date)
    return table


def _row(name: str, pooja_date: date) -> dict:
    return {
        "sevakartha_name": name,
        "department": "ISE",
        "seva_type": "Archana",
        "pooja_date": pooja_date,
        "day": pooja_date.day,
        "month": pooja_date.month,
        "year": pooja_date.year,
        "status": "booked",
    }


@pytest.fixture
def engine(tmp_path):
    eng = sa.create_engine(f"sqlite:///{tmp_path / 'migrate.db'}")
    yield eng
    eng.dispose()


def test_upgrade_adds_unique_date_to_existing_table(engine):
    table = _legacy_bookings_table(sa.MetaData())
    table.metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(table.insert().values(**_row("Ramesh", date(2025, 6, 4))))

    _upgrade(engine)

    inspector = sa.inspect(engine)
    uniques = inspector.get_unique_constraints("bookings")
    assert [cons["column_names"] for cons in uniques] == [["pooja_date"]]
    assert "ix_bookings_pooja_date" not in [index["name"] for index in inspector.get_indexes("bookings")]

    reflected = sa.Table("bookings", sa.MetaData(), autoload_with=engine)
    with engine.connect() as conn:
        names = conn.execute(sa.select(reflected.c.sevakartha_name)).scalars().all()
    assert names == ["Ramesh"]

    with pytest.raises(IntegrityError):
        with engine.begin() as conn:
            conn.execute(reflected.insert().values(**_row("Suresh", date(2025, 6, 4))))


def test_upgrade_creates_table_on_empty_database(engine):
    _upgrade(engine)

    inspector = sa.inspect(engine)
    assert "bookings" in inspector.get_table_names()
    assert [cons["name"] for cons in inspector.get_unique_constraints("bookings")] == ["uq_bookings_pooja_date"]
    assert inspector.get_indexes("bookings") == []


def test_upgrade_is_a_no_op_when_already_current(engine):
    _upgrade(engine)
    _upgrade(engine)

    uniques = sa.inspect(engine).get_unique_constraints("bookings")
    assert [cons["column_names"] for cons in uniques] == [["pooja_date"]]
