"""create_reporting_periods_and_activity_tables

Revision ID: 8b3e4f6a1c22
Revises: 5f1c2a7d9e01
Create Date: 2026-01-05 09:01:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "8b3e4f6a1c22"
down_revision = "5f1c2a7d9e01"
branch_labels = None
depends_on = None

ACTIVITY_TABLES = (
    "fuel_usage",
    "vehicle_usage",
    "refrigerant_usage",
    "electricity_usage",
    "commuting_data",
)


def activity_columns() -> list:
    """Columns shared by every activity table."""
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("reporting_period_id", sa.Uuid(), nullable=False),
        sa.Column("co2_emissions", sa.Numeric(precision=16, scale=6), nullable=True),
        sa.Column("ch4_emissions", sa.Numeric(precision=16, scale=9), nullable=True),
        sa.Column("n2o_emissions", sa.Numeric(precision=16, scale=9), nullable=True),
        sa.Column(
            "co2e_calculated",
            sa.Numeric(precision=16, scale=6),
            nullable=True,
            comment="Calculated CO2e in tonnes",
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["reporting_period_id"], ["reporting_periods.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    ]


def upgrade() -> None:
    op.create_table(
        "reporting_periods",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("organization_id", sa.Uuid(), nullable=False),
        sa.Column(
            "facility_id",
            sa.Uuid(),
            nullable=True,
            comment="Optional facility the period is scoped to",
        ),
        sa.Column("period_start", sa.Date(), nullable=False, comment="First day of the period"),
        sa.Column("period_end", sa.Date(), nullable=False, comment="Last day of the period"),
        sa.Column(
            "status",
            sa.String(length=20),
            nullable=False,
            comment="draft, submitted, validated or archived",
        ),
        sa.Column(
            "scope_selection",
            sa.JSON(),
            nullable=True,
            comment="Scopes the organization reports for this period",
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "period_start < period_end", name="ck_reporting_periods_start_before_end"
        ),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["facility_id"], ["facilities.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        comment="Reporting periods grouping activity data for one calculation",
    )
    op.create_index(
        op.f("ix_reporting_periods_organization_id"),
        "reporting_periods",
        ["organization_id"],
        unique=False,
    )
    op.create_index(
        "ix_reporting_periods_org_start",
        "reporting_periods",
        ["organization_id", "period_start"],
        unique=False,
    )

    op.create_table(
        "fuel_usage",
        *activity_columns(),
        sa.Column("fuel_type", sa.String(length=50), nullable=False, comment="Fuel code, e.g. diesel"),
        sa.Column("fuel_state", sa.String(length=20), nullable=True, comment="solid, liquid or gas"),
        sa.Column("quantity", sa.Numeric(precision=14, scale=4), nullable=False),
        sa.Column("unit", sa.String(length=20), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=True),
        sa.Column("source_description", sa.String(length=200), nullable=True),
        comment="Stationary combustion activity data (Scope 1)",
    )
    op.create_table(
        "vehicle_usage",
        *activity_columns(),
        sa.Column("vehicle_id", sa.String(length=100), nullable=True),
        sa.Column("vehicle_type", sa.String(length=20), nullable=True),
        sa.Column("fuel_type", sa.String(length=50), nullable=False),
        sa.Column(
            "fuel_consumed",
            sa.Numeric(precision=14, scale=4),
            nullable=True,
            comment="Fuel consumed; entries without it contribute zero",
        ),
        sa.Column("mileage", sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column("unit", sa.String(length=20), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=True),
        comment="Mobile combustion activity data (Scope 1)",
    )
    op.create_table(
        "refrigerant_usage",
        *activity_columns(),
        sa.Column("equipment_id", sa.String(length=100), nullable=True),
        sa.Column("refrigerant_type", sa.String(length=50), nullable=False),
        sa.Column("quantity_leaked", sa.Numeric(precision=14, scale=4), nullable=True),
        sa.Column(
            "quantity_purchased",
            sa.Numeric(precision=14, scale=4),
            nullable=True,
            comment="Record keeping only, never used in calculations",
        ),
        sa.Column("unit", sa.String(length=20), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=True),
        sa.Column("leak_detection_log", sa.JSON(), nullable=True),
        comment="Fugitive emissions activity data (Scope 1)",
    )
    op.create_table(
        "electricity_usage",
        *activity_columns(),
        sa.Column("facility_id", sa.Uuid(), nullable=True),
        sa.Column("meter_number", sa.String(length=100), nullable=True),
        sa.Column("kwh_consumption", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("peak_hours_kwh", sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column("off_peak_kwh", sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column(
            "grid_region",
            sa.String(length=50),
            nullable=True,
            comment="Grid code; NULL uses the national average grid",
        ),
        sa.Column("billing_period_start", sa.Date(), nullable=False),
        sa.Column("billing_period_end", sa.Date(), nullable=False),
        sa.CheckConstraint(
            "billing_period_start < billing_period_end",
            name="ck_electricity_usage_billing_start_before_end",
        ),
        sa.ForeignKeyConstraint(["facility_id"], ["facilities.id"], ondelete="SET NULL"),
        comment="Purchased electricity activity data (Scope 2)",
    )
    op.create_table(
        "commuting_data",
        *activity_columns(),
        sa.Column("employee_count", sa.Integer(), nullable=False),
        sa.Column(
            "avg_distance_km",
            sa.Numeric(precision=10, scale=2),
            nullable=True,
            comment="Average one-way distance in km",
        ),
        sa.Column("transport_mode", sa.String(length=50), nullable=False),
        sa.Column("days_per_week", sa.Integer(), nullable=True),
        sa.Column("wfh_days", sa.Integer(), nullable=True),
        sa.Column("survey_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        comment="Employee commuting activity data (Scope 3)",
    )

    for table in ACTIVITY_TABLES:
        op.create_index(
            op.f(f"ix_{table}_reporting_period_id"),
            table,
            ["reporting_period_id"],
            unique=False,
        )


def downgrade() -> None:
    for table in reversed(ACTIVITY_TABLES):
        op.drop_index(op.f(f"ix_{table}_reporting_period_id"), table_name=table)
        op.drop_table(table)

    op.drop_index("ix_reporting_periods_org_start", table_name="reporting_periods")
    op.drop_index(op.f("ix_reporting_periods_organization_id"), table_name="reporting_periods")
    op.drop_table("reporting_periods")
