"""registered vehicles, gate logs and announcements

Revision ID: 0002_vehicles_announcements
Revises: 0001_initial
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "0002_vehicles_announcements"
down_revision = "0001_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE TYPE registered_vehicle_type AS ENUM ('Car', 'Bike', 'Other')")
    op.execute("CREATE TYPE gate_vehicle_type AS ENUM ('Resident', 'Visitor', 'Service')")
    op.execute("CREATE TYPE announcement_priority AS ENUM ('low', 'medium', 'high')")

    op.create_table(
        "registered_vehicles",
        sa.Column("vehicle_no", sa.String(20), nullable=False),
        sa.Column("type", postgresql.ENUM("Car", "Bike", "Other",
                  name="registered_vehicle_type", create_type=False), nullable=False),
        sa.Column("color", sa.String(50), nullable=True),
        sa.Column("image_url", sa.String(1000), nullable=True),
        sa.Column("resident_id", sa.UUID(), nullable=False),
        sa.Column("resident_name", sa.String(255), nullable=False),
        sa.Column("house_no", sa.String(50), nullable=False),
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["resident_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_registered_vehicles_id"), "registered_vehicles", ["id"], unique=False)
    op.create_index(op.f("ix_registered_vehicles_vehicle_no"), "registered_vehicles", ["vehicle_no"], unique=True)
    op.create_index(op.f("ix_registered_vehicles_resident_id"), "registered_vehicles", ["resident_id"], unique=False)

    op.create_table(
        "vehicle_logs",
        sa.Column("vehicle_no", sa.String(20), nullable=False),
        sa.Column("type", postgresql.ENUM("Resident", "Visitor", "Service",
                  name="gate_vehicle_type", create_type=False), nullable=False),
        sa.Column("entry_time", sa.DateTime(), nullable=False),
        sa.Column("exit_time", sa.DateTime(), nullable=True),
        sa.Column("resident_id", sa.UUID(), nullable=True),
        sa.Column("resident_name", sa.String(255), nullable=True),
        sa.Column("house_no", sa.String(50), nullable=True),
        sa.Column("visitor_name", sa.String(255), nullable=True),
        sa.Column("purpose", sa.Text(), nullable=True),
        sa.Column("logged_by", sa.UUID(), nullable=True),
        sa.Column("logged_by_name", sa.String(255), nullable=False),
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["resident_id"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["logged_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_vehicle_logs_id"), "vehicle_logs", ["id"], unique=False)
    op.create_index(op.f("ix_vehicle_logs_vehicle_no"), "vehicle_logs", ["vehicle_no"], unique=False)
    op.create_index(op.f("ix_vehicle_logs_entry_time"), "vehicle_logs", ["entry_time"], unique=False)
    op.create_index(op.f("ix_vehicle_logs_resident_id"), "vehicle_logs", ["resident_id"], unique=False)
    op.create_index(op.f("ix_vehicle_logs_house_no"), "vehicle_logs", ["house_no"], unique=False)
    op.create_index(
        "uq_vehicle_logs_inside",
        "vehicle_logs",
        ["vehicle_no"],
        unique=True,
        postgresql_where=sa.text("exit_time IS NULL"),
    )

    op.create_table(
        "announcements",
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("priority", postgresql.ENUM("low", "medium", "high",
                  name="announcement_priority", create_type=False), nullable=False),
        sa.Column("image_urls", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.UUID(), nullable=True),
        sa.Column("created_by_name", sa.String(255), nullable=False),
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_announcements_id"), "announcements", ["id"], unique=False)


def downgrade() -> None:
    op.drop_table("announcements")
    op.drop_index("uq_vehicle_logs_inside", table_name="vehicle_logs")
    op.drop_table("vehicle_logs")
    op.drop_table("registered_vehicles")
    op.execute("DROP TYPE IF EXISTS announcement_priority")
    op.execute("DROP TYPE IF EXISTS gate_vehicle_type")
    op.execute("DROP TYPE IF EXISTS registered_vehicle_type")
