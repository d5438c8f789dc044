"""Typer-based command line interface for running charging simulations."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..analysis.comparison import compare_configurations, repeat_runs, sweep_chargepoint_counts
from ..core.aggregation import aggregate_tick_data, mean_total_power
from ..core.defaults import default_config
from ..core.statistics import compute_statistics
from ..core.validator import ConfigurationError, load_config_file
from ..core.windows import CalendarUnit
from ..engine import simulate
from ..models.config import ArrivalStrategy, ChargepointType, SimulationConfig
from ..models.results import Statistics, aggregated_frame

app = typer.Typer(help="EV charging-station utilisation simulator")
console = Console()

LOGGER = logging.getLogger(__name__)


@app.callback()
def _configure(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(config_path: Optional[Path]) -> SimulationConfig:
    """Load a configuration file, or fall back to the built-in defaults."""
    try:
        if config_path is None:
            LOGGER.info("No configuration file supplied; using defaults")
            return default_config()
        return load_config_file(config_path)
    except ConfigurationError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


def _apply_overrides(
    config: SimulationConfig,
    *,
    seed: Optional[int],
    chargepoints: Optional[int],
    power: Optional[float],
    strategy: Optional[ArrivalStrategy],
) -> SimulationConfig:
    changes = {}
    if seed is not None:
        changes["seed"] = seed
    if chargepoints is not None or power is not None:
        current_power = config.chargepoints[0][0].power if config.chargepoints else 11.0
        count = chargepoints if chargepoints is not None else config.chargepoint_count
        changes["chargepoints"] = ((ChargepointType(power=current_power if power is None else power), count),)
    if strategy is not None:
        changes["arrival_strategy"] = strategy
    if not changes:
        return config
    try:
        return config.with_updates(**changes)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _statistics_table(statistics: Statistics, title: str = "Simulation Statistics") -> Table:
    table = Table(title=title)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Total energy consumed (kWh)", f"{statistics.total_energy_kwh:,.2f}")
    table.add_row("Theoretical maximum power demand (kW)", f"{statistics.theoretical_max_power_kw:,.2f}")
    table.add_row("Actual maximum power demand (kW)", f"{statistics.actual_max_power_kw:,.2f}")
    table.add_row("Concurrency factor (%)", f"{statistics.concurrency_factor * 100:.2f}")
    return table


@app.command()
def run(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON configuration file"),
    seed: Optional[int] = typer.Option(None, help="Random seed"),
    chargepoints: Optional[int] = typer.Option(None, help="Number of chargepoints"),
    power: Optional[float] = typer.Option(None, help="Chargepoint power in kW"),
    strategy: Optional[ArrivalStrategy] = typer.Option(None, help="Arrival strategy"),
    export: Optional[Path] = typer.Option(None, help="Write aggregated power demand to this CSV file"),
    window: CalendarUnit = typer.Option(CalendarUnit.DAILY, help="Aggregation window for --export"),
    start_date: datetime = typer.Option(
        datetime(datetime.now().year, 1, 1), formats=["%Y-%m-%d"], help="Date of the first tick"
    ),
) -> None:
    """Simulate one year and print the resulting statistics."""
    config = _apply_overrides(
        _load_config(config_path), seed=seed, chargepoints=chargepoints, power=power, strategy=strategy
    )
    with console.status("Simulating one year of charging..."):
        result = simulate(config)
    statistics = compute_statistics(config, result.per_tick_data)
    console.print(_statistics_table(statistics))
    console.print(f"Charging events: {len(result.charging_events):,}")

    if export is not None:
        windows = aggregate_tick_data(config, result.per_tick_data, start_date, window, mean_total_power)
        frame = aggregated_frame(windows).rename(columns={"value": "mean_power_kw"})
        export.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(export, index=False)
        console.print(f"Aggregated power demand exported to: {export}")


@app.command()
def sweep(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON configuration file"),
    max_chargepoints: int = typer.Option(30, min=1, help="Largest chargepoint count to simulate"),
    power: Optional[float] = typer.Option(None, help="Chargepoint power in kW"),
) -> None:
    """Show how the concurrency factor changes with the number of chargepoints."""
    config = _load_config(config_path)
    with console.status("Sweeping chargepoint counts..."):
        frame = sweep_chargepoint_counts(config, range(1, max_chargepoints + 1), power_kw=power)

    table = Table(title="Concurrency Factor by Chargepoint Count")
    table.add_column("Chargepoints", justify="right")
    table.add_column("Concurrency factor (%)", justify="right")
    for row in frame.itertuples(index=False):
        table.add_row(str(row.chargepoints), f"{row.concurrency_factor * 100:.2f}")
    console.print(table)


@app.command()
def repeat(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON configuration file"),
    runs: int = typer.Option(5, min=1, help="Number of runs"),
    seed: Optional[int] = typer.Option(None, help="Pin every run to this seed"),
) -> None:
    """Run the same configuration several times to check reproducibility."""
    config = _load_config(config_path)
    with console.status(f"Running {runs} simulations..."):
        frame = repeat_runs(config, runs, seed=seed)

    title = f"Repeated Runs (seed={seed})" if seed is not None else "Repeated Runs (unseeded)"
    table = Table(title=title)
    table.add_column("Run", justify="right")
    table.add_column("Total energy (kWh)", justify="right")
    table.add_column("Max power (kW)", justify="right")
    for row in frame.itertuples(index=False):
        table.add_row(str(row.run), f"{row.total_energy_kwh:,.2f}", f"{row.actual_max_power_kw:,.2f}")
    console.print(table)


@app.command()
def compare(
    config_paths: List[Path] = typer.Argument(..., help="JSON configuration files to compare"),
) -> None:
    """Compare the statistics of several configurations."""
    configs = []
    for path in config_paths:
        try:
            config = load_config_file(path)
        except ConfigurationError as exc:
            raise typer.BadParameter(str(exc), param_hint=str(path)) from exc
        configs.append(config if config.name else config.with_updates(name=path.stem))

    with console.status(f"Simulating {len(configs)} configurations..."):
        frame = compare_configurations(configs)

    table = Table(title="Configuration Comparison")
    table.add_column("Configuration")
    table.add_column("Total energy (kWh)", justify="right")
    table.add_column("Max power (kW)", justify="right")
    table.add_column("Concurrency factor (%)", justify="right")
    for row in frame.itertuples(index=False):
        table.add_row(
            str(row.name),
            f"{row.total_energy_kwh:,.2f}",
            f"{row.actual_max_power_kw:,.2f}",
            f"{row.concurrency_factor * 100:.2f}",
        )
    console.print(table)


def main() -> None:
    """Entry point for CLI execution."""
    app()


if __name__ == "__main__":
    main()
