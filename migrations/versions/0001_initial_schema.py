"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column(
            "role",
            sa.Enum("ADMIN", "MANAGER", "STAFF", name="user_role_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("subject_type", sa.String(50), nullable=False),
        sa.Column("subject_id", sa.Integer(), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_audit_log_event_type", "audit_log", ["event_type"])

    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("opening_balance", sa.Numeric(12, 2), nullable=False),
        sa.Column("opening_date", sa.Date(), nullable=True),
        sa.Column("total_due", sa.Numeric(12, 2), nullable=False),
        sa.Column("credit_limit", sa.Numeric(12, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_customers_name", "customers", ["name"])

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("size", sa.String(50), nullable=True),
        sa.Column("pieces_per_bundle", sa.Integer(), nullable=False),
        sa.Column("rate_per_kg", sa.Numeric(12, 2), nullable=False),
        sa.Column("opening_stock", sa.Integer(), nullable=False),
        sa.Column("stock_pieces", sa.Integer(), nullable=False),
        sa.Column("min_stock_alert", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_products_name", "products", ["name"])

    op.create_table(
        "payment_types",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )

    op.create_table(
        "sales",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("bill_no", sa.String(50), nullable=False),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("sale_date", sa.Date(), nullable=False),
        sa.Column("total_pieces", sa.Integer(), nullable=False),
        sa.Column("total_weight_kg", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount", sa.Numeric(12, 2), nullable=False),
        sa.Column("net_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("paid_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("due_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("posted_due", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_type_id", sa.Integer(), sa.ForeignKey("payment_types.id"), nullable=True),
        sa.Column("payment_ref", sa.String(100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_sales_bill_no", "sales", ["bill_no"], unique=True)
    op.create_index("ix_sales_customer_id", "sales", ["customer_id"])
    op.create_index("ix_sales_sale_date", "sales", ["sale_date"])

    op.create_table(
        "sale_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "sale_id", sa.Integer(),
            sa.ForeignKey("sales.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("bundles", sa.Integer(), nullable=False),
        sa.Column("extra_pieces", sa.Integer(), nullable=False),
        sa.Column("total_pieces", sa.Integer(), nullable=False),
        sa.Column("weight_kg", sa.Numeric(12, 2), nullable=False),
        sa.Column("rate_per_kg", sa.Numeric(12, 2), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
    )
    op.create_index("ix_sale_items_sale_id", "sale_items", ["sale_id"])
    op.create_index("ix_sale_items_product_id", "sale_items", ["product_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column(
            "sale_id", sa.Integer(),
            sa.ForeignKey("sales.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_type_id", sa.Integer(), sa.ForeignKey("payment_types.id"), nullable=True),
        sa.Column("payment_ref", sa.String(100), nullable=True),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_payments_customer_id", "payments", ["customer_id"])
    op.create_index("ix_payments_sale_id", "payments", ["sale_id"])
    op.create_index("ix_payments_payment_date", "payments", ["payment_date"])

    op.create_table(
        "productions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("pieces_produced", sa.Integer(), nullable=False),
        sa.Column("production_date", sa.Date(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_productions_product_id", "productions", ["product_id"])
    op.create_index("ix_productions_production_date", "productions", ["production_date"])

    op.create_table(
        "sales_returns",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("return_no", sa.String(50), nullable=False),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column(
            "sale_id", sa.Integer(),
            sa.ForeignKey("sales.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("return_date", sa.Date(), nullable=False),
        sa.Column("total_weight", sa.Numeric(12, 2), nullable=False),
        sa.Column("sub_total", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount", sa.Numeric(12, 2), nullable=False),
        sa.Column("grand_total", sa.Numeric(12, 2), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_sales_returns_return_no", "sales_returns", ["return_no"], unique=True)
    op.create_index("ix_sales_returns_customer_id", "sales_returns", ["customer_id"])
    op.create_index("ix_sales_returns_return_date", "sales_returns", ["return_date"])

    op.create_table(
        "sales_return_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "sales_return_id", sa.Integer(),
            sa.ForeignKey("sales_returns.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("bundles", sa.Integer(), nullable=False),
        sa.Column("extra_pieces", sa.Integer(), nullable=False),
        sa.Column("total_pieces", sa.Integer(), nullable=False),
        sa.Column("weight_kg", sa.Numeric(12, 2), nullable=False),
        sa.Column("rate_per_kg", sa.Numeric(12, 2), nullable=False),
        sa.Column("sub_total", sa.Numeric(12, 2), nullable=False),
    )
    op.create_index(
        "ix_sales_return_items_sales_return_id", "sales_return_items", ["sales_return_id"]
    )
    op.create_index("ix_sales_return_items_product_id", "sales_return_items", ["product_id"])

    op.create_table(
        "expense_categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "expense_category_id", sa.Integer(),
            sa.ForeignKey("expense_categories.id"), nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("expense_date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_expenses_expense_category_id", "expenses", ["expense_category_id"])
    op.create_index("ix_expenses_expense_date", "expenses", ["expense_date"])


def downgrade() -> None:
    for table in (
        "expenses",
        "expense_categories",
        "sales_return_items",
        "sales_returns",
        "productions",
        "payments",
        "sale_items",
        "sales",
        "payment_types",
        "products",
        "customers",
        "audit_log",
        "users",
    ):
        op.drop_table(table)
    sa.Enum(name="user_role_enum").drop(op.get_bind(), checkfirst=True)
