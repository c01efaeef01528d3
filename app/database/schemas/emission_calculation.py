"""
EmissionCalculation SQLAlchemy model.

Exactly one row per reporting period. The row is fully overwritten on every
recalculation; calculated_at records the last write.
"""
import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import relationship

from app.database import Base


def _emissions_column(comment: str, scale: int = 4) -> Column:
    return Column(
        Numeric(18, scale, asdecimal=False),
        nullable=False,
        default=0.0,
        comment=comment,
    )


class EmissionCalculationDBModel(Base):
    """
    Aggregated emissions of one reporting period, all values in tonnes.

    The factor values, GWP values and factor table version applied are copied
    into the row so later reference data changes never alter stored results.
    """

    __tablename__ = "emission_calculations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    reporting_period_id = Column(
        Uuid,
        ForeignKey("reporting_periods.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    # CO2e totals
    scope1_co2e = _emissions_column("Scope 1 CO2e: fuel, vehicles, refrigerants")
    scope2_co2e = _emissions_column("Scope 2 CO2e: purchased electricity")
    scope3_co2e = _emissions_column("Scope 3 CO2e: employee commuting")
    total_co2e = _emissions_column("Scope 1 + Scope 2 + Scope 3")

    # Per-gas totals
    scope1_co2 = _emissions_column("Scope 1 CO2")
    scope1_ch4 = _emissions_column("Scope 1 CH4", scale=9)
    scope1_n2o = _emissions_column("Scope 1 N2O", scale=9)
    scope2_co2 = _emissions_column("Scope 2 CO2")
    scope2_ch4 = _emissions_column("Scope 2 CH4", scale=9)
    scope2_n2o = _emissions_column("Scope 2 N2O", scale=9)
    scope3_co2 = _emissions_column("Scope 3 CO2")
    scope3_ch4 = _emissions_column("Scope 3 CH4", scale=9)
    scope3_n2o = _emissions_column("Scope 3 N2O", scale=9)
    total_co2 = _emissions_column("Total CO2")
    total_ch4 = _emissions_column("Total CH4", scale=9)
    total_n2o = _emissions_column("Total N2O", scale=9)

    breakdown_by_category = Column(JSON, nullable=False, default=dict)

    emission_factors_used = Column(JSON, nullable=False, default=dict)

    emissions_per_employee = _emissions_column("Total CO2e per employee")

    total_employees = Column(Integer, nullable=False, default=0)

    warnings = Column(
        JSON,
        nullable=False,
        default=list,
        comment="Unrecognized subtype codes found while calculating",
    )

    gwp_values = Column(JSON, nullable=False, default=dict)

    factor_table_version = Column(String(20), nullable=False)

    calculated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    reporting_period = relationship("ReportingPeriodDBModel", back_populates="calculation")

    __table_args__ = ({"comment": "Aggregated emissions per reporting period"},)

    def __repr__(self):
        return (
            f"<EmissionCalculationDBModel: period {self.reporting_period_id} "
            f"total={self.total_co2e} tCO2e>"
        )
