#!/usr/bin/env python3
"""
CLI script to seed the database with the demo organization and calculate it.

Usage:
    # Basic seeding
    python scripts/seed_database.py

    # Clear existing data before seeding
    python scripts/seed_database.py --clear

    # Seed without calculating emissions
    python scripts/seed_database.py --skip-calculations

    # Run migrations first, against another environment's config
    python scripts/seed_database.py --migrate --config production.toml
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path so we can import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import get_config
from app.database.base import apply_db_migration, get_db_url, get_engine_kw
from app.database.session_manager.db_session import Database
from app.services.seed_database import DatabaseSeeder
from app.utils.constants import ConfigFile
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create Rich console
console = Console()


def print_header(text: str, style: str = "bold cyan"):
    """Print a formatted header using Rich Panel."""
    console.print(
        Panel(
            Text(text, justify="center", style=style),
            border_style="cyan",
            padding=(1, 2),
        )
    )


def print_config(args):
    """Print configuration details."""
    config_table = Table(show_header=False, box=None, padding=(0, 2))
    config_table.add_column("Setting", style="bold yellow")
    config_table.add_column("Value", style="green")

    config_table.add_row("⚙️  Config File", args.config)
    config_table.add_row("🗄️  Run Migrations", "Yes" if args.migrate else "No")
    config_table.add_row("🗑️  Clear Existing", "Yes" if args.clear else "No")
    config_table.add_row(
        "🧮 Skip Calculations", "Yes" if args.skip_calculations else "No"
    )

    console.print(config_table)
    console.print()


def print_stats(stats: dict):
    """Print seeding statistics using Rich Table."""
    print_header("SEEDING STATISTICS", "bold green")

    stats_table = Table(show_header=True, box=None, padding=(0, 2))
    stats_table.add_column("Category", style="bold cyan", width=30)
    stats_table.add_column("Count", justify="right", style="bold green")

    stats_table.add_row("🏢 Organizations", str(stats["organizations"]))
    stats_table.add_row("🏭 Facilities", str(stats["facilities"]))
    stats_table.add_row("📅 Reporting Periods", str(stats["reporting_periods"]))
    for category, count in stats["activities"].items():
        stats_table.add_row(f"   {category}", str(count))

    console.print(stats_table)
    console.print()


def print_calculation(calculation):
    """Print the stored calculation using Rich Tables."""
    print_header("EMISSION CALCULATION", "bold magenta")

    scopes = Table(show_header=True, box=None, padding=(0, 2))
    scopes.add_column("Scope", style="bold cyan", width=30)
    scopes.add_column("tCO2e", justify="right", style="bold green")
    scopes.add_row("Scope 1 (fuel, vehicles, refrigerants)", f"{calculation.scope1_co2e:.4f}")
    scopes.add_row("Scope 2 (electricity)", f"{calculation.scope2_co2e:.4f}")
    scopes.add_row("Scope 3 (commuting, monthly)", f"{calculation.scope3_co2e:.4f}")
    scopes.add_row("Total", f"{calculation.total_co2e:.4f}")
    console.print(scopes)
    console.print()

    breakdown = Table(show_header=True, box=None, padding=(0, 2))
    breakdown.add_column("Category", style="bold cyan", width=30)
    breakdown.add_column("tCO2e", justify="right", style="green")
    for category, value in calculation.breakdown_by_category.items():
        breakdown.add_row(category, f"{value:.4f}")
    console.print(breakdown)
    console.print()

    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("Label", style="bold yellow")
    summary.add_column("Value", style="bold magenta")
    summary.add_row("👥 Employees", str(calculation.total_employees))
    summary.add_row("📈 tCO2e per Employee", f"{calculation.emissions_per_employee:.4f}")
    summary.add_row("📚 Factor Table Version", calculation.factor_table_version)
    console.print(summary)

    if calculation.warnings:
        console.print()
        console.print(
            Panel(
                f"[yellow]⚠️  {len(calculation.warnings)} unrecognized subtype codes[/yellow]",
                border_style="yellow",
            )
        )
        for i, warning in enumerate(calculation.warnings, 1):
            console.print(f"  {i}. [dim]{warning['message']}[/dim]")

    console.print()


async def main():
    """Main entry point for the seeding script."""
    parser = argparse.ArgumentParser(
        description="Seed the database with the demo organization"
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Clear existing data before seeding",
    )
    parser.add_argument(
        "--skip-calculations",
        action="store_true",
        help="Skip the emission calculation of the seeded period",
    )
    parser.add_argument(
        "--migrate",
        action="store_true",
        help="Create the database and apply Alembic migrations first",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=ConfigFile.DEVELOPMENT,
        help=f"Config file under config/ (default: {ConfigFile.DEVELOPMENT})",
    )

    args = parser.parse_args()

    print_header("DATABASE SEEDING", "bold cyan")
    print_config(args)

    try:
        config = get_config(args.config)

        if args.migrate:
            with console.status("[bold cyan]Applying migrations...", spinner="dots"):
                await apply_db_migration(config)

        async_db_url = get_db_url(config)
        Database.init(async_db_url, engine_kw=get_engine_kw(async_db_url))
        logger.info("Database initialized")

        with console.status("[bold cyan]Seeding database...", spinner="dots"):
            async with DatabaseSeeder() as seeder:
                stats = await seeder.seed_all(
                    clear_existing=args.clear,
                    skip_calculations=args.skip_calculations,
                )

        print_stats(stats)
        if stats["calculation"] is not None:
            print_calculation(stats["calculation"])

        console.print(
            Panel(
                Text("✅ SEEDING COMPLETED SUCCESSFULLY", justify="center"),
                border_style="bold green",
                style="bold green",
            )
        )

    except Exception as e:
        logger.error(f"Seeding failed: {e}", exc_info=True)

        console.print()
        console.print(
            Panel(
                f"[bold red]❌ SEEDING FAILED[/bold red]\n\n[red]{e!s}[/red]",
                border_style="bold red",
            )
        )
        console.print()
        sys.exit(1)

    finally:
        await Database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
