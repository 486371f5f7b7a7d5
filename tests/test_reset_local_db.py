import importlib.util
import pathlib
from datetime import date

import database
from app import models

SCRIPT = pathlib.Path(__file__).resolve().parents[1] / "scripts" / "reset_local_db.py"


def _load_script():
    module_spec = importlib.util.spec_from_file_location("reset_local_db", SCRIPT)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


def test_reset_empties_bookings_table():
    models.Base.metadata.create_all(bind=database.engine, tables=[models.SevaBooking.__table__])
    with database.SessionLocal() as db:
        db.add(
            models.SevaBooking(
                sevakartha_name="Ramesh",
                department="ISE",
                seva_type="Archana",
                pooja_date=date(2025, 6, 9),
                day=9,
                month=6,
                year=2025,
            )
        )
        db.commit()

    assert _load_script().main(["--yes"]) == 0

    with database.SessionLocal() as db:
        assert db.query(models.SevaBooking).count() == 0


def test_reset_asks_before_deleting(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt: "n")
    models.Base.metadata.create_all(bind=database.engine, tables=[models.SevaBooking.__table__])

    assert _load_script().main([]) == 0
