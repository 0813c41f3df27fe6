"""Create back office schema

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2025-11-03 09:12:44.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "3f1c9a7d2b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

currency = sa.Enum("EUR", "GBP", name="currency")
wage_type = sa.Enum("HOURLY", "FIXED", name="wagetype")
expense_status = sa.Enum("RAISED", "PAID", name="expensestatus")
payment_method = sa.Enum("CASH", "ACCOUNT", name="paymentmethod")
user_role = sa.Enum("ADMIN", "USER", name="userrole")


def timestamps():
    return [
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "stores",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("address", sa.String, nullable=True),
        sa.Column("phone", sa.String, nullable=True),
        sa.Column("manager_name", sa.String, nullable=True),
        sa.Column("supported_currencies", sa.JSON, nullable=False),
        sa.Column("default_currency", currency, nullable=False),
        *timestamps(),
    )

    op.create_table(
        "employees",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("email", sa.String, nullable=True),
        sa.Column("phone", sa.String, nullable=True),
        sa.Column("wage_type", wage_type, nullable=False),
        sa.Column("hourly_rate_eur", sa.Numeric(10, 2), nullable=True),
        sa.Column("hourly_rate_gbp", sa.Numeric(10, 2), nullable=True),
        sa.Column("weekly_wage_eur", sa.Numeric(10, 2), nullable=True),
        sa.Column("weekly_wage_gbp", sa.Numeric(10, 2), nullable=True),
        *timestamps(),
    )

    op.create_table(
        "drivers",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("email", sa.String, nullable=True),
        sa.Column("phone", sa.String, nullable=True),
        *timestamps(),
    )

    op.create_table(
        "vendors",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("contact_name", sa.String, nullable=True),
        sa.Column("email", sa.String, nullable=True),
        sa.Column("phone", sa.String, nullable=True),
        *timestamps(),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("email", sa.String, nullable=False, unique=True),
        sa.Column("name", sa.String, nullable=True),
        sa.Column("role", user_role, nullable=False),
        *timestamps(),
    )

    channels = [
        sa.Column(name, sa.Integer, nullable=False, server_default="0")
        for name in (
            "cash",
            "online",
            "delivery",
            "just_eat",
            "mylocal",
            "credit_card",
            "deliveroo",
            "uber_eats",
            "total",
            "cash_in_till",
            "difference",
        )
    ]
    op.create_table(
        "sales",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("store_id", sa.Integer, sa.ForeignKey("stores.id"), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("currency", currency, nullable=False),
        *channels,
        sa.Column("notes", sa.String, nullable=True),
        *timestamps(),
        sa.UniqueConstraint(
            "store_id", "currency", "date", name="uq_sale_store_currency_date"
        ),
    )

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("store_id", sa.Integer, sa.ForeignKey("stores.id"), nullable=False),
        sa.Column("vendor_id", sa.Integer, sa.ForeignKey("vendors.id"), nullable=False),
        sa.Column("currency", currency, nullable=False),
        sa.Column("status", expense_status, nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("description", sa.String, nullable=True),
        sa.Column("expense_date", sa.Date, nullable=False),
        *timestamps(),
    )

    op.create_table(
        "attendance",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column(
            "employee_id", sa.Integer, sa.ForeignKey("employees.id"), nullable=False
        ),
        sa.Column("store_id", sa.Integer, sa.ForeignKey("stores.id"), nullable=False),
        sa.Column("check_in", sa.DateTime, nullable=False, index=True),
        sa.Column("check_out", sa.DateTime, nullable=False),
        sa.Column("hours_worked", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", currency, nullable=False),
        sa.Column("amount_to_pay", sa.Integer, nullable=False),
        sa.Column("wage_type", wage_type, nullable=True),
        sa.Column("notes", sa.String, nullable=True),
        *timestamps(),
    )

    op.create_table(
        "deliveries",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("driver_id", sa.Integer, sa.ForeignKey("drivers.id"), nullable=False),
        sa.Column("store_id", sa.Integer, sa.ForeignKey("stores.id"), nullable=False),
        sa.Column("delivery_date", sa.Date, nullable=False, index=True),
        sa.Column("check_in", sa.DateTime, nullable=False),
        sa.Column("check_out", sa.DateTime, nullable=False),
        sa.Column("hours_worked", sa.Numeric(10, 2), nullable=False),
        sa.Column("number_of_deliveries", sa.Integer, nullable=False),
        sa.Column("currency", currency, nullable=False),
        sa.Column("expense_amount", sa.Integer, nullable=False, server_default="0"),
        sa.Column("notes", sa.String, nullable=True),
        *timestamps(),
    )

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column(
            "employee_id", sa.Integer, sa.ForeignKey("employees.id"), nullable=False
        ),
        sa.Column("amount_paid", sa.Integer, nullable=False),
        sa.Column("currency", currency, nullable=False),
        sa.Column("payment_method", payment_method, nullable=False),
        sa.Column("paid_date", sa.Date, nullable=False, index=True),
        sa.Column("notes", sa.String, nullable=True),
        *timestamps(),
    )

    op.create_table(
        "store_employees",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("store_id", sa.Integer, sa.ForeignKey("stores.id"), nullable=False),
        sa.Column(
            "employee_id", sa.Integer, sa.ForeignKey("employees.id"), nullable=False
        ),
        sa.Column("assigned_at", sa.DateTime, nullable=False),
        sa.UniqueConstraint("store_id", "employee_id", name="uq_store_employee"),
    )

    op.create_table(
        "store_drivers",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("store_id", sa.Integer, sa.ForeignKey("stores.id"), nullable=False),
        sa.Column("driver_id", sa.Integer, sa.ForeignKey("drivers.id"), nullable=False),
        sa.Column("assigned_at", sa.DateTime, nullable=False),
        sa.UniqueConstraint("store_id", "driver_id", name="uq_store_driver"),
    )



def downgrade() -> None:
    """Downgrade schema."""

    for table in (
        "store_drivers",
        "store_employees",
        "payments",
        "deliveries",
        "attendance",
        "expenses",
        "sales",
        "users",
        "vendors",
        "drivers",
        "employees",
        "stores",
    ):
        op.drop_table(table)

    for enum in (user_role, payment_method, expense_status, wage_type, currency):
        enum.drop(op.get_bind(), checkfirst=True)
