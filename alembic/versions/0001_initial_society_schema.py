"""users, bills, complaints and counters

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE TYPE user_role AS ENUM ('admin', 'resident', 'security')")
    op.execute("CREATE TYPE bill_status AS ENUM ('Draft', 'Unpaid', 'Pending', 'Paid')")
    op.execute("CREATE TYPE complaint_status AS ENUM ('Pending', 'In Progress', 'Resolved')")
    op.execute("CREATE TYPE complaint_category AS ENUM ("
               "'Water', 'Electricity', 'Maintenance', 'Security', 'Other')")

    op.create_table(
        "users",
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("house_no", sa.String(50), nullable=True),
        sa.Column("cnic", sa.String(20), nullable=True),
        sa.Column("role", postgresql.ENUM("admin", "resident", "security",
                  name="user_role", create_type=False), nullable=False),
        sa.Column("created_by", sa.UUID(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_house_no"), "users", ["house_no"], unique=False)
    op.create_index(op.f("ix_users_role"), "users", ["role"], unique=False)
    op.create_index(op.f("ix_users_deleted_at"), "users", ["deleted_at"], unique=False)
    op.create_index(op.f("ix_users_is_active"), "users", ["is_active"], unique=False)

    op.create_table(
        "bills",
        sa.Column("resident_id", sa.UUID(), nullable=False),
        sa.Column("resident_name", sa.String(255), nullable=False),
        sa.Column("house_no", sa.String(50), nullable=False),
        sa.Column("month", sa.String(7), nullable=False),
        sa.Column("base_charges", sa.Numeric(12, 2), nullable=False),
        sa.Column("complaint_charges", sa.JSON(), nullable=False),
        sa.Column("previous_dues", sa.Numeric(12, 2), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("status", postgresql.ENUM("Draft", "Unpaid", "Pending", "Paid",
                  name="bill_status", create_type=False), nullable=False),
        sa.Column("is_archived", sa.Boolean(), nullable=False),
        sa.Column("sent_by", sa.UUID(), nullable=True),
        sa.Column("sent_at", sa.DateTime(), nullable=True),
        sa.Column("proof_url", sa.String(1000), nullable=True),
        sa.Column("proof_uploaded_at", sa.DateTime(), nullable=True),
        sa.Column("verified_by", sa.UUID(), nullable=True),
        sa.Column("verified_at", sa.DateTime(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["resident_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["sent_by"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["verified_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bills_id"), "bills", ["id"], unique=False)
    op.create_index(op.f("ix_bills_resident_id"), "bills", ["resident_id"], unique=False)
    op.create_index(op.f("ix_bills_month"), "bills", ["month"], unique=False)
    op.create_index(op.f("ix_bills_status"), "bills", ["status"], unique=False)
    op.create_index(op.f("ix_bills_is_archived"), "bills", ["is_archived"], unique=False)
    op.create_index(op.f("ix_bills_deleted_at"), "bills", ["deleted_at"], unique=False)
    op.create_index(
        "uq_bills_resident_month_live",
        "bills",
        ["resident_id", "month"],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL"),
    )

    op.create_table(
        "complaints",
        sa.Column("complaint_number", sa.String(20), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", postgresql.ENUM("Water", "Electricity", "Maintenance", "Security", "Other",
                  name="complaint_category", create_type=False), nullable=False),
        sa.Column("image_url", sa.String(1000), nullable=True),
        sa.Column("status", postgresql.ENUM("Pending", "In Progress", "Resolved",
                  name="complaint_status", create_type=False), nullable=False),
        sa.Column("resident_id", sa.UUID(), nullable=False),
        sa.Column("resident_name", sa.String(255), nullable=False),
        sa.Column("house_no", sa.String(50), nullable=False),
        sa.Column("resolution_notes", sa.Text(), nullable=True),
        sa.Column("resolved_by", sa.UUID(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        sa.Column("charge_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("added_to_bill", sa.Boolean(), nullable=False),
        sa.Column("bill_id", sa.UUID(), nullable=True),
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["resident_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["bill_id"], ["bills.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_complaints_id"), "complaints", ["id"], unique=False)
    op.create_index(op.f("ix_complaints_complaint_number"), "complaints", ["complaint_number"], unique=True)
    op.create_index(op.f("ix_complaints_status"), "complaints", ["status"], unique=False)
    op.create_index(op.f("ix_complaints_resident_id"), "complaints", ["resident_id"], unique=False)
    op.create_index(op.f("ix_complaints_added_to_bill"), "complaints", ["added_to_bill"], unique=False)

    op.create_table(
        "counters",
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("name"),
    )


def downgrade() -> None:
    op.drop_table("counters")
    op.drop_table("complaints")
    op.drop_index("uq_bills_resident_month_live", table_name="bills")
    op.drop_table("bills")
    op.drop_table("users")
    op.execute("DROP TYPE IF EXISTS complaint_category")
    op.execute("DROP TYPE IF EXISTS complaint_status")
    op.execute("DROP TYPE IF EXISTS bill_status")
    op.execute("DROP TYPE IF EXISTS user_role")
