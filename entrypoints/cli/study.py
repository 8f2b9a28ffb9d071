from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import pandas as pd
import typer
from loguru import logger

from costseg.adapters.config import config
from costseg.adapters.storage import export_tables, write_df
from costseg.analysis.depreciation import calculate_depreciation
from costseg.domain.asset_classes import get_default_allocation
from costseg.domain.errors import CostSegError
from costseg.services.report_generator import assets_from_allocation, generate_study_report

app = typer.Typer(help="Cost segregation study tools (reports, allocations, schedules).")


def _load_input(path: Path) -> dict:
    data = json.loads(path.read_text())
    # no explicit assets: fall back to the typical split for the property type
    if not data.get("assets"):
        value = float(data.get("building_value") or data.get("purchase_price") or 0.0)
        allocation = get_default_allocation(data.get("property_type", ""), value)
        data["assets"] = [a.model_dump() for a in assets_from_allocation(allocation)]
        # baseline covers the same depreciable basis as the split (land excluded)
        data["building_value"] = round(sum(a.amount for a in allocation if a.recovery_period != 0), 2)
        logger.info("No assets given; using default allocation", property_type=data.get("property_type"))
    data.setdefault("tax_rate", config.DEFAULT_TAX_RATE)
    data.setdefault("discount_rate", config.DEFAULT_DISCOUNT_RATE)
    data.setdefault("bonus_depreciation_rate", config.DEFAULT_BONUS_RATE)
    return data


@app.command()
def report(
    input_json: Path = typer.Argument(..., exists=True, help="Study input JSON"),
    output: Optional[Path] = typer.Option(None, help="Write the report JSON here instead of stdout"),
    horizon_years: int = typer.Option(config.SAVINGS_HORIZON_YEARS, help="Years counted in horizon savings"),
) -> None:
    """
    Generate a full study report from a JSON input file.
    """
    try:
        result = generate_study_report(_load_input(input_json), horizon_years=horizon_years).to_dict()
    except CostSegError as e:
        logger.error("Study input rejected: {}", e)
        raise typer.Exit(code=2) from e

    text = json.dumps(result, indent=2)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text)
        logger.info("Study report written", path=str(output))
    else:
        typer.echo(text)


@app.command()
def allocation(
    property_type: str = typer.Argument(..., help="commercial, residential, multifamily, ..."),
    value: float = typer.Argument(..., help="Value to allocate"),
) -> None:
    """
    Print the typical cost segregation split for a property type.
    """
    try:
        items = get_default_allocation(property_type, value)
    except CostSegError as e:
        logger.error("{}", e)
        raise typer.Exit(code=2) from e

    df = pd.DataFrame([i.to_dict() for i in items])
    typer.echo(df.to_string(index=False))


@app.command()
def schedule(
    cost_basis: float = typer.Argument(...),
    recovery_period: float = typer.Argument(..., help="5, 7, 15, 27.5 or 39"),
    bonus_rate: float = typer.Option(config.DEFAULT_BONUS_RATE, help="Bonus depreciation %"),
    csv: Optional[str] = typer.Option(None, help="Write the schedule to this CSV/parquet path"),
) -> None:
    """
    Print (or export) a single-asset MACRS schedule.
    """
    try:
        entries = calculate_depreciation(cost_basis, recovery_period, bonus_rate)
    except CostSegError as e:
        logger.error("{}", e)
        raise typer.Exit(code=2) from e

    df = pd.DataFrame([e.to_dict() for e in entries])
    if csv:
        write_df(df, csv)
        logger.info("Schedule written", path=csv, years=len(df))
    else:
        typer.echo(df.to_string(index=False))


@app.command("export-schedules")
def export_schedules(
    input_json: Path = typer.Argument(..., exists=True, help="Study input JSON"),
    out_dir: Path = typer.Argument(..., help="Directory for the exported tables"),
    fmt: str = typer.Option("csv", "--format", help="csv or parquet"),
) -> None:
    """
    Write asset breakdown, depreciation comparison, tax savings and summary tables.
    """
    try:
        result = generate_study_report(_load_input(input_json)).to_dict()
    except CostSegError as e:
        logger.error("Study input rejected: {}", e)
        raise typer.Exit(code=2) from e

    tables = {
        name: pd.DataFrame(result[name])
        for name in ("asset_breakdown", "depreciation_schedule", "tax_savings_schedule")
    }
    tables["summary"] = pd.DataFrame([result["summary"]])

    try:
        paths = export_tables(tables, out_dir, fmt)
    except ValueError as e:
        logger.error("{}", e)
        raise typer.Exit(code=2) from e
    for path in paths:
        logger.info("Export written: {}", path)


if __name__ == "__main__":
    app()
