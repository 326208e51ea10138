"""Initial schema: registry, rides, history, wallets and sequences.

Revision ID: 001
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None

RIDE_STATUS = sa.Enum(
    "REQUESTED",
    "ACCEPTED",
    "IN_PROGRESS",
    "COMPLETED",
    "CANCELLED",
    name="ridestatus",
)
PARTICIPANT_ROLE = sa.Enum("RIDER", "DRIVER", name="participantrole")


def upgrade() -> None:
    # ── drivers ───────────────────────────────────────────────────────
    op.create_table(
        "drivers",
        sa.Column("identity", sa.String(128), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("vehicle_info", sa.String(255), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False, server_default="400"),
        sa.Column("total_rides", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_registered", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("rating BETWEEN 100 AND 500", name="ck_drivers_rating"),
    )

    # ── riders ────────────────────────────────────────────────────────
    op.create_table(
        "riders",
        sa.Column("identity", sa.String(128), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False, server_default="400"),
        sa.Column("total_rides", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_registered", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("rating BETWEEN 100 AND 500", name="ck_riders_rating"),
    )

    # ── rides ─────────────────────────────────────────────────────────
    op.create_table(
        "rides",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("rider_identity", sa.String(128), nullable=False),
        sa.Column("driver_identity", sa.String(128), nullable=True),
        sa.Column("pickup", sa.Text, nullable=False),
        sa.Column("destination", sa.Text, nullable=False),
        sa.Column("distance", sa.Integer, nullable=False),
        sa.Column("fare", sa.BigInteger, nullable=False),
        sa.Column("status", RIDE_STATUS, nullable=False, server_default="REQUESTED"),
        sa.Column("rider_rated", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("driver_rated", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("cancellation_reason", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("distance > 0", name="ck_rides_distance"),
    )
    op.create_index("idx_rides_status", "rides", ["status"])
    op.create_index("idx_rides_rider", "rides", ["rider_identity"])
    op.create_index("idx_rides_driver", "rides", ["driver_identity"])

    # ── ride_history ──────────────────────────────────────────────────
    op.create_table(
        "ride_history",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("identity", sa.String(128), nullable=False),
        sa.Column("role", PARTICIPANT_ROLE, nullable=False),
        sa.Column("ride_id", sa.Integer, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_ride_history_identity", "ride_history", ["identity", "role"]
    )

    # ── accounts ──────────────────────────────────────────────────────
    op.create_table(
        "accounts",
        sa.Column("identity", sa.String(128), primary_key=True),
        sa.Column("balance", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("balance >= 0", name="ck_accounts_balance"),
    )

    # ── sequences ─────────────────────────────────────────────────────
    op.create_table(
        "sequences",
        sa.Column("name", sa.String(32), primary_key=True),
        sa.Column("value", sa.Integer, nullable=False, server_default="0"),
    )


def downgrade() -> None:
    op.drop_table("sequences")
    op.drop_table("accounts")
    op.drop_index("idx_ride_history_identity", table_name="ride_history")
    op.drop_table("ride_history")
    op.drop_index("idx_rides_driver", table_name="rides")
    op.drop_index("idx_rides_rider", table_name="rides")
    op.drop_index("idx_rides_status", table_name="rides")
    op.drop_table("rides")
    op.drop_table("riders")
    op.drop_table("drivers")
    PARTICIPANT_ROLE.drop(op.get_bind(), checkfirst=True)
    RIDE_STATUS.drop(op.get_bind(), checkfirst=True)
