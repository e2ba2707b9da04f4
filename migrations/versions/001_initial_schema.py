"""Initial schema: user profiles and trips.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── users ─────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("vehicle", sa.JSON, nullable=True),
    )

    # ── trips ─────────────────────────────────────────────────────────
    op.create_table(
        "trips",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("driver_id", sa.String(64), nullable=False),
        sa.Column("driver_name", sa.String(120), nullable=True),
        sa.Column("driver_vehicle", sa.JSON, nullable=False),
        sa.Column("trip_date", sa.Date, nullable=False),
        sa.Column("departure_time", sa.String(5), nullable=False),
        sa.Column("arrival_time", sa.String(5), nullable=False),
        sa.Column("origin", sa.String(255), nullable=False),
        sa.Column("destination", sa.String(255), nullable=False),
        sa.Column("cost", sa.Float, nullable=False),
        sa.Column("payment_methods", sa.JSON, nullable=False),
        sa.Column("route_tag", sa.String(32), nullable=False),
        sa.Column("affinity", sa.String(255), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column(
            "status",
            sa.Enum("scheduled", "cancelled", "completed", name="tripstatus"),
            nullable=False,
            server_default="scheduled",
        ),
        sa.Column("passengers", sa.JSON, nullable=False),
        sa.Column("available_seats", sa.Integer, nullable=False),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "available_seats >= 0", name="ck_trips_seats_non_negative"
        ),
    )
    op.create_index("idx_trips_driver", "trips", ["driver_id"])
    op.create_index("idx_trips_route", "trips", ["route_tag"])
    op.create_index("idx_trips_date", "trips", ["trip_date"])


def downgrade() -> None:
    op.drop_table("trips")
    op.drop_table("users")
    op.execute("DROP TYPE IF EXISTS tripstatus")
