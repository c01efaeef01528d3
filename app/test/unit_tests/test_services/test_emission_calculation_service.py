"""
Service tests for the recalculation orchestrator following kkb_fastapi pattern.
"""
import asyncio
import copy
from datetime import date
from uuid import uuid4

import pytest

from app.database.repositories import (
    ActivityRepository,
    EmissionCalculationRepository,
    OrganizationRepository,
    ReportingPeriodRepository,
)
from app.database.session_manager.db_session import Database
from app.services.calculators.emission_calculator import (
    EmissionCalculationService,
    validate_reporting_period,
)
from app.services.calculators.gas_converter import DEFAULT_GWP, GWPValues
from app.services.seed_database import DatabaseSeeder
from app.test.factory.activity import (
    CommutingDataFactory,
    ElectricityUsageFactory,
    FuelUsageFactory,
    RefrigerantUsageFactory,
    VehicleUsageFactory,
)
from app.test.factory.organization import (
    FacilityFactory,
    OrganizationFactory,
    ReportingPeriodFactory,
)
from app.utils.constants import ActivityCategory
from app.utils.exceptions import (
    InvalidActivityDataError,
    InvalidReportingPeriodError,
    ReportingPeriodNotFoundError,
)


async def create_period(employees=(60, 40), **period_kw):
    organization = await OrganizationFactory()
    for employee_count in employees:
        await FacilityFactory(organization_id=organization.id, employee_count=employee_count)
    period = await ReportingPeriodFactory(organization_id=organization.id, **period_kw)
    return organization, period


async def load_entries(session, reporting_period_id, collection="fuel_usage"):
    period = await ReportingPeriodRepository(session).get_with_activities(reporting_period_id)
    return getattr(period, collection)


def calculation_values(calculation):
    """Every stored column except the timestamp, detached from the instance."""
    return {
        column.key: copy.deepcopy(getattr(calculation, column.key))
        for column in calculation.__table__.columns
        if column.key != "calculated_at"
    }


@pytest.mark.asyncio
async def test_total_employees_sums_facilities(test_db_session):
    """Test headcount is summed over facilities, a missing headcount counting as 0."""
    organization = await OrganizationFactory()
    await FacilityFactory(organization_id=organization.id, employee_count=60)
    await FacilityFactory(organization_id=organization.id, employee_count=40)
    await FacilityFactory(organization_id=organization.id, employee_count=None)
    lonely = await OrganizationFactory()

    repo = OrganizationRepository(test_db_session)

    assert await repo.get_total_employees(organization.id) == 100
    assert await repo.get_total_employees(lonely.id) == 0


@pytest.mark.asyncio
async def test_recalculate_seeded_scenario(test_db_session):
    """Test the demo organization reproduces the reference scenario totals."""
    stats = await DatabaseSeeder(session=test_db_session).seed_all()
    calculation = stats["calculation"]

    assert stats["activities"] == {
        "fuel": 3,
        "vehicles": 2,
        "refrigerants": 1,
        "electricity": 2,
        "commuting": 2,
    }
    assert calculation.scope1_co2e == pytest.approx(24.4, abs=1e-3)
    assert calculation.scope2_co2e == pytest.approx(28.0, abs=1e-3)
    assert calculation.scope3_co2e == pytest.approx(14.7, abs=1e-3)
    assert calculation.total_co2e == pytest.approx(67.1, abs=1e-3)
    assert calculation.total_employees == 100
    assert calculation.emissions_per_employee == pytest.approx(0.671, abs=1e-4)
    assert calculation.breakdown_by_category == pytest.approx(
        {
            "fuel": 17.9,
            "vehicles": 6.0,
            "refrigerants": 0.5,
            "electricity": 28.0,
            "commuting": 14.7,
        },
        abs=1e-3,
    )
    assert calculation.warnings == []

    fuel_repo = ActivityRepository(test_db_session, ActivityCategory.FUEL)
    assert await fuel_repo.count({"reporting_period_id": stats["reporting_period_id"]}) == 3


@pytest.mark.asyncio
async def test_recalculate_writes_entry_cached_values(test_db_session):
    """Test every entry gets its cached emissions written."""
    _, period = await create_period()
    await FuelUsageFactory(reporting_period_id=period.id, quantity=1000.0)
    await VehicleUsageFactory(reporting_period_id=period.id)
    await RefrigerantUsageFactory(reporting_period_id=period.id)
    await ElectricityUsageFactory(reporting_period_id=period.id)
    await CommutingDataFactory(reporting_period_id=period.id)

    service = EmissionCalculationService(test_db_session, gwp=DEFAULT_GWP)
    await service.recalculate(period.id)

    [fuel] = await load_entries(test_db_session, period.id)
    # 2.690006 stored at 4 decimals, gas masses at 9
    assert fuel.co2e_calculated == 2.69
    assert fuel.co2_emissions == 2.6807
    assert fuel.ch4_emissions == pytest.approx(0.00011, abs=1e-12)

    [commuting] = await load_entries(test_db_session, period.id, "commuting_data")
    assert commuting.co2e_calculated == 3.6833

    period = await ReportingPeriodRepository(test_db_session).get_with_activities(period.id)
    for collection in ("fuel_usage", "vehicle_usage", "refrigerant_usage",
                       "electricity_usage", "commuting_data"):
        entries = getattr(period, collection)
        assert entries
        assert all(entry.co2e_calculated is not None for entry in entries)


@pytest.mark.asyncio
async def test_recalculate_is_idempotent(test_db_session):
    """Test repeated recalculation keeps a single row identical except for calculated_at."""
    _, period = await create_period()
    await FuelUsageFactory(reporting_period_id=period.id)
    await FuelUsageFactory(reporting_period_id=period.id, fuel_type="disel")
    await ElectricityUsageFactory(reporting_period_id=period.id)
    await CommutingDataFactory(reporting_period_id=period.id)

    service = EmissionCalculationService(test_db_session)
    first = await service.recalculate(period.id)
    first_values = calculation_values(first)
    first_calculated_at = first.calculated_at
    second = await service.recalculate(period.id)

    assert second.id == first.id
    assert first_values["warnings"]
    assert first_values["scope1_n2o"] > 0
    assert calculation_values(second) == first_values
    assert second.calculated_at >= first_calculated_at
    assert await EmissionCalculationRepository(test_db_session).count() == 1


@pytest.mark.asyncio
async def test_recalculate_picks_up_changed_entries(test_db_session):
    """Test cached and aggregated values follow edits to the entries."""
    _, period = await create_period()
    await FuelUsageFactory(reporting_period_id=period.id, quantity=1000.0)

    service = EmissionCalculationService(test_db_session)
    before = (await service.recalculate(period.id)).total_co2e

    [fuel] = await load_entries(test_db_session, period.id)
    fuel.quantity = 2000.0
    await test_db_session.commit()

    after = (await service.recalculate(period.id)).total_co2e
    assert after == pytest.approx(2 * before, abs=1e-4)


@pytest.mark.asyncio
async def test_recalculate_invalid_entry_keeps_previous_calculation(test_db_session):
    """Test an invalid entry rolls back everything and leaves the last result intact."""
    _, period = await create_period()
    await FuelUsageFactory(reporting_period_id=period.id, quantity=1000.0)

    service = EmissionCalculationService(test_db_session)
    previous_total = (await service.recalculate(period.id)).total_co2e

    commuting = await CommutingDataFactory(reporting_period_id=period.id, days_per_week=9)

    with pytest.raises(InvalidActivityDataError) as exc_info:
        await service.recalculate(period.id)
    assert exc_info.value.category == "commuting"
    assert exc_info.value.entry_id == commuting.id

    stored = await EmissionCalculationRepository(test_db_session).get_by_reporting_period_id(
        period.id
    )
    assert stored.total_co2e == previous_total
    assert await EmissionCalculationRepository(test_db_session).count() == 1


@pytest.mark.asyncio
async def test_recalculate_failure_writes_no_cached_values(test_db_session):
    """Test no entry is updated when another entry of the period is invalid."""
    _, period = await create_period()
    await FuelUsageFactory(reporting_period_id=period.id)
    await FuelUsageFactory(reporting_period_id=period.id, quantity=-5.0)

    service = EmissionCalculationService(test_db_session)
    with pytest.raises(InvalidActivityDataError) as exc_info:
        await service.recalculate(period.id)
    assert exc_info.value.field == "quantity"

    entries = await load_entries(test_db_session, period.id)
    assert [entry.co2e_calculated for entry in entries] == [None, None]
    assert await EmissionCalculationRepository(test_db_session).count() == 0


@pytest.mark.asyncio
async def test_recalculate_unknown_period(test_db_session):
    """Test a missing period is reported as not found."""
    service = EmissionCalculationService(test_db_session)

    with pytest.raises(ReportingPeriodNotFoundError):
        await service.recalculate(uuid4())


@pytest.mark.asyncio
async def test_recalculate_empty_period(test_db_session):
    """Test a period without entries stores an all-zero calculation."""
    _, period = await create_period(employees=())

    calculation = await EmissionCalculationService(test_db_session).recalculate(period.id)

    assert calculation.total_co2e == 0
    assert calculation.total_employees == 0
    assert calculation.emissions_per_employee == 0
    assert calculation.emission_factors_used == {"electricity_ph_grid_average": 0.00063}


@pytest.mark.asyncio
async def test_concurrent_recalculations_store_one_row():
    """Test simultaneous recalculations of one period never duplicate the row."""
    _, period = await create_period()
    await FuelUsageFactory(reporting_period_id=period.id)
    await CommutingDataFactory(reporting_period_id=period.id)

    async with Database() as first_session, Database() as second_session:
        results = await asyncio.gather(
            EmissionCalculationService(first_session).recalculate(period.id),
            EmissionCalculationService(second_session).recalculate(period.id),
        )

    assert results[0].total_co2e == results[1].total_co2e

    async with Database() as session:
        assert await EmissionCalculationRepository(session).count() == 1


@pytest.mark.asyncio
async def test_recalculate_with_injected_gwp(test_db_session):
    """Test GWP values change CO2e of fuel entries and are stored with the result."""
    _, period = await create_period()
    await FuelUsageFactory(reporting_period_id=period.id, quantity=1000.0)

    default = await EmissionCalculationService(test_db_session, gwp=DEFAULT_GWP).recalculate(
        period.id
    )
    default_total = default.total_co2e

    higher_gwp = GWPValues(ch4=250, n2o=2980)
    higher = await EmissionCalculationService(test_db_session, gwp=higher_gwp).recalculate(
        period.id
    )

    assert higher.total_co2e > default_total
    assert higher.total_co2 == pytest.approx(2.6807, abs=1e-4)
    assert higher.gwp_values == {"ch4": 250, "n2o": 2980}


@pytest.mark.asyncio
async def test_recalculate_reports_unknown_subtypes(test_db_session):
    """Test a misspelled fuel contributes zero and is reported with a suggestion."""
    _, period = await create_period()
    await FuelUsageFactory(reporting_period_id=period.id, fuel_type="disel")

    calculation = await EmissionCalculationService(test_db_session).recalculate(period.id)

    assert calculation.breakdown_by_category["fuel"] == 0
    assert calculation.emission_factors_used["disel"] == 0
    [warning] = calculation.warnings
    assert warning["subtype"] == "disel"
    assert warning["suggestion"] == "diesel"


@pytest.mark.asyncio
async def test_recalculate_organization_continues_past_failures(test_db_session):
    """Test one failing period does not stop the other periods of the batch."""
    organization, good_period = await create_period()
    await FuelUsageFactory(reporting_period_id=good_period.id)
    bad_period = await ReportingPeriodFactory(
        organization_id=organization.id,
        period_start=date(2025, 1, 1),
        period_end=date(2025, 12, 31),
    )
    await CommutingDataFactory(reporting_period_id=bad_period.id, wfh_days=6)

    results = await EmissionCalculationService(test_db_session).recalculate_organization(
        organization.id
    )

    assert [r["reporting_period_id"] for r in results] == [good_period.id, bad_period.id]
    assert results[0]["status"] == "success"
    assert results[0]["total_co2e"] > 0
    assert results[1]["status"] == "error"
    assert "commuting" in results[1]["error"]

    repo = EmissionCalculationRepository(test_db_session)
    assert await repo.get_by_reporting_period_id(good_period.id) is not None
    assert await repo.get_by_reporting_period_id(bad_period.id) is None


def test_validate_reporting_period():
    """Test periods must start strictly before they end."""
    validate_reporting_period(date(2024, 1, 1), date(2024, 12, 31))

    with pytest.raises(InvalidReportingPeriodError):
        validate_reporting_period(date(2024, 12, 31), date(2024, 1, 1))
    with pytest.raises(InvalidReportingPeriodError):
        validate_reporting_period(date(2024, 1, 1), date(2024, 1, 1))
