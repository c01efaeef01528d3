"""create_emission_calculations_table

Revision ID: c4d7e8f90b13
Revises: 8b3e4f6a1c22
Create Date: 2026-01-05 09:02:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "c4d7e8f90b13"
down_revision = "8b3e4f6a1c22"
branch_labels = None
depends_on = None

SCOPES = ("scope1", "scope2", "scope3", "total")


def emissions_columns() -> list:
    columns = []
    for scope in SCOPES:
        columns.append(sa.Column(f"{scope}_co2e", sa.Numeric(precision=18, scale=4), nullable=False))
        columns.append(sa.Column(f"{scope}_co2", sa.Numeric(precision=18, scale=4), nullable=False))
        columns.append(sa.Column(f"{scope}_ch4", sa.Numeric(precision=18, scale=9), nullable=False))
        columns.append(sa.Column(f"{scope}_n2o", sa.Numeric(precision=18, scale=9), nullable=False))
    return columns


def upgrade() -> None:
    op.create_table(
        "emission_calculations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("reporting_period_id", sa.Uuid(), nullable=False),
        *emissions_columns(),
        sa.Column("breakdown_by_category", sa.JSON(), nullable=False),
        sa.Column("emission_factors_used", sa.JSON(), nullable=False),
        sa.Column(
            "emissions_per_employee",
            sa.Numeric(precision=18, scale=4),
            nullable=False,
            comment="Total CO2e per employee",
        ),
        sa.Column("total_employees", sa.Integer(), nullable=False),
        sa.Column(
            "warnings",
            sa.JSON(),
            nullable=False,
            comment="Unrecognized subtype codes found while calculating",
        ),
        sa.Column("gwp_values", sa.JSON(), nullable=False),
        sa.Column("factor_table_version", sa.String(length=20), nullable=False),
        sa.Column("calculated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["reporting_period_id"], ["reporting_periods.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        comment="Aggregated emissions per reporting period",
    )
    op.create_index(
        op.f("ix_emission_calculations_reporting_period_id"),
        "emission_calculations",
        ["reporting_period_id"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index(
        op.f("ix_emission_calculations_reporting_period_id"),
        table_name="emission_calculations",
    )
    op.drop_table("emission_calculations")
