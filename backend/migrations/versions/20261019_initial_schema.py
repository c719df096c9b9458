"""Initial agency schema

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "materials",
        sa.Column("material_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("unit", sa.String(32), nullable=False, server_default="ton"),
        sa.Column("rate_per_unit", sa.Numeric(12, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("material_id"),
        sa.UniqueConstraint("name"),
        sqlite_autoincrement=True,
    )

    op.create_table(
        "vehicle_owners",
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("contact_info", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("owner_id"),
        sa.UniqueConstraint("name"),
        sqlite_autoincrement=True,
    )

    op.create_table(
        "vehicles",
        sa.Column("vehicle_id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("vehicle_number", sa.String(32), nullable=False),
        sa.Column("last_used_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["vehicle_owners.owner_id"]),
        sa.PrimaryKeyConstraint("vehicle_id"),
        sa.UniqueConstraint("owner_id", "vehicle_number", name="uq_vehicles_owner_number"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("vehicles", schema=None) as batch_op:
        batch_op.create_index("ix_vehicles_owner_last_used", ["owner_id", "last_used_at"], unique=False)

    op.create_table(
        "bills",
        sa.Column("bill_id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("vehicle_number", sa.String(32), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("daily_bill_no", sa.Integer(), nullable=False),
        sa.Column("include_pass", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("bill_timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["vehicle_owners.owner_id"]),
        sa.PrimaryKeyConstraint("bill_id"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("bills", schema=None) as batch_op:
        batch_op.create_index("ix_bills_bill_timestamp", ["bill_timestamp"], unique=False)
        batch_op.create_index("ix_bills_owner_timestamp", ["owner_id", "bill_timestamp"], unique=False)

    op.create_table(
        "transactions",
        sa.Column("transaction_id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("material_id", sa.Integer(), nullable=False),
        sa.Column("vehicle_number", sa.String(32), nullable=False),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False),
        sa.Column("rate_at_sale", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_cost", sa.Numeric(14, 2), nullable=False),
        sa.Column("bill_id", sa.Integer(), nullable=True),
        sa.Column("mattam", sa.String(64), nullable=True),
        sa.Column("grill_mattam", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("mattam_checked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("transaction_timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["vehicle_owners.owner_id"]),
        sa.ForeignKeyConstraint(["material_id"], ["materials.material_id"]),
        sa.ForeignKeyConstraint(["bill_id"], ["bills.bill_id"]),
        sa.PrimaryKeyConstraint("transaction_id"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("transactions", schema=None) as batch_op:
        batch_op.create_index("ix_transactions_bill_id", ["bill_id"], unique=False)
        batch_op.create_index("ix_transactions_owner_timestamp", ["owner_id", "transaction_timestamp"], unique=False)

    op.create_table(
        "owner_passes",
        sa.Column("pass_id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("vehicle_number", sa.String(32), nullable=False),
        sa.Column("pass_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("bill_id", sa.Integer(), nullable=True),
        sa.Column("pass_date", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["vehicle_owners.owner_id"]),
        sa.ForeignKeyConstraint(["bill_id"], ["bills.bill_id"]),
        sa.PrimaryKeyConstraint("pass_id"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("owner_passes", schema=None) as batch_op:
        batch_op.create_index("ix_owner_passes_bill_id", ["bill_id"], unique=False)
        batch_op.create_index("ix_owner_passes_owner_date", ["owner_id", "pass_date"], unique=False)

    op.create_table(
        "owner_payments",
        sa.Column("payment_id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("mode", sa.String(32), nullable=True),
        sa.Column("notes", sa.String(255), nullable=True),
        sa.Column("payment_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["vehicle_owners.owner_id"]),
        sa.PrimaryKeyConstraint("payment_id"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("owner_payments", schema=None) as batch_op:
        batch_op.create_index("ix_owner_payments_owner_date", ["owner_id", "payment_date"], unique=False)

    op.create_table(
        "daily_bill_sequences",
        sa.Column("business_date", sa.Date(), nullable=False),
        sa.Column("last_number", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.PrimaryKeyConstraint("business_date"),
    )


def downgrade():
    op.drop_table("daily_bill_sequences")

    with op.batch_alter_table("owner_payments", schema=None) as batch_op:
        batch_op.drop_index("ix_owner_payments_owner_date")
    op.drop_table("owner_payments")

    with op.batch_alter_table("owner_passes", schema=None) as batch_op:
        batch_op.drop_index("ix_owner_passes_owner_date")
        batch_op.drop_index("ix_owner_passes_bill_id")
    op.drop_table("owner_passes")

    with op.batch_alter_table("transactions", schema=None) as batch_op:
        batch_op.drop_index("ix_transactions_owner_timestamp")
        batch_op.drop_index("ix_transactions_bill_id")
    op.drop_table("transactions")

    with op.batch_alter_table("bills", schema=None) as batch_op:
        batch_op.drop_index("ix_bills_owner_timestamp")
        batch_op.drop_index("ix_bills_bill_timestamp")
    op.drop_table("bills")

    with op.batch_alter_table("vehicles", schema=None) as batch_op:
        batch_op.drop_index("ix_vehicles_owner_last_used")
    op.drop_table("vehicles")

    op.drop_table("vehicle_owners")
    op.drop_table("materials")
