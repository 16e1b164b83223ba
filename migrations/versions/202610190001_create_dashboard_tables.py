"""Create user, customer, invoice and activity log tables."""

import sqlalchemy as sa
from alembic import op


def _has_table(table_name: str, bind) -> bool:
    inspector = sa.inspect(bind)
    return inspector.has_table(table_name)


# revision identifiers, used by Alembic.
revision = "202610190001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()

    if not _has_table("user", bind):
        op.create_table(
            "user",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(length=100), nullable=False, server_default=""),
            sa.Column("email", sa.String(length=120), nullable=False, unique=True),
            sa.Column("password", sa.String(length=255), nullable=False),
            sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.text("0")),
            sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        )

    if not _has_table("customer", bind):
        op.create_table(
            "customer",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column("name", sa.String(length=100), nullable=False),
            sa.Column("email", sa.String(length=120), nullable=False, unique=True),
            sa.Column("image_url", sa.String(length=255), nullable=True),
        )

    if not _has_table("invoice", bind):
        op.create_table(
            "invoice",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column("customer_id", sa.String(length=36), nullable=False),
            sa.Column("amount", sa.Integer(), nullable=False),
            sa.Column("status", sa.String(length=10), nullable=False),
            sa.Column("date", sa.Date(), nullable=False),
            sa.ForeignKeyConstraint(
                ["customer_id"], ["customer.id"], name="fk_invoice_customer_id"
            ),
            sa.CheckConstraint("amount > 0", name="ck_invoice_amount_positive"),
            sa.CheckConstraint(
                "status IN ('pending', 'paid')", name="ck_invoice_status"
            ),
        )
        op.create_index("ix_invoice_customer_id", "invoice", ["customer_id"])
        op.create_index("ix_invoice_status", "invoice", ["status"])
        op.create_index("ix_invoice_date", "invoice", ["date"])

    if not _has_table("activity_log", bind):
        op.create_table(
            "activity_log",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("user_id", sa.Integer(), nullable=True),
            sa.Column("activity", sa.String(length=255), nullable=False),
            sa.Column("timestamp", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(
                ["user_id"], ["user.id"], name="fk_activity_log_user_id"
            ),
        )


def downgrade():
    bind = op.get_bind()
    for table_name in ("activity_log", "invoice", "customer", "user"):
        if _has_table(table_name, bind):
            op.drop_table(table_name)
