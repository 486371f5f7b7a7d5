"""Create bookings table

Revision ID: 0001_create_bookings
Revises:
Create Date: 2025-06-01
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_create_bookings"
down_revision = None
branch_labels = None
depends_on = None

UNIQUE_NAME = "uq_bookings_pooja_date"
LEGACY_INDEX_NAME = "ix_bookings_pooja_date"


def _pooja_date_is_unique(inspector: sa.Inspector) -> bool:
    for cons in inspector.get_unique_constraints("bookings"):
        if list(cons.get("column_names") or []) == ["pooja_date"]:
            return True
    for index in inspector.get_indexes("bookings"):
        if index.get("unique") and list(index.get("column_names") or []) == ["pooja_date"]:
            return True
    return False


def _plain_index_exists(inspector: sa.Inspector, name: str) -> bool:
    return any(
        index.get("name") == name and not index.get("unique") for index in inspector.get_indexes("bookings")
    )


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    if "bookings" not in inspector.get_table_names():
        op.create_table(
            "bookings",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("sevakartha_name", sa.String(length=255), nullable=False),
            sa.Column("department", sa.String(length=255), nullable=False),
            sa.Column("seva_type", sa.String(length=255), nullable=False),
            sa.Column("pooja_date", sa.Date(), nullable=False),
            sa.Column("day", sa.Integer(), nullable=False),
            sa.Column("month", sa.Integer(), nullable=False),
            sa.Column("year", sa.Integer(), nullable=False),
            sa.Column("status", sa.String(length=20), nullable=True, server_default="confirmed"),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.UniqueConstraint("pooja_date", name=UNIQUE_NAME),
        )
        return

    # Tables created before this revision may lack the one-booking-per-date guard.
    # Duplicate dates already in the table make this fail; resolve them by hand first.
    has_unique = _pooja_date_is_unique(inspector)
    has_legacy_index = _plain_index_exists(inspector, LEGACY_INDEX_NAME)
    if has_unique and not has_legacy_index:
        return
    with op.batch_alter_table("bookings") as batch_op:
        if has_legacy_index:
            batch_op.drop_index(LEGACY_INDEX_NAME)
        if not has_unique:
            batch_op.create_unique_constraint(UNIQUE_NAME, ["pooja_date"])


def downgrade() -> None:
    op.drop_table("bookings")
