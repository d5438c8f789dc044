import json
import tempfile
import unittest
from pathlib import Path

import pandas as pd
from typer.testing import CliRunner

from chargesim.ui.cli import app


def write_config(directory: Path, name: str, **overrides) -> Path:
    payload = {
        "simulationGranularityMs": 60 * 60 * 1000,
        "chargepoints": [[{"power": 11}, 2]],
        "arrivalAtHour": {"probabilityDistribution": [0.1] * 24, "multiplier": 1.0},
        "chargingNeeds": {"probabilityDistribution": [[0, 0.4], [50, 0.6]]},
        "carConsumptionKWhPer100km": 18,
        "seed": 2,
    }
    payload.update(overrides)
    path = directory / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()
        self._tmp = tempfile.TemporaryDirectory()
        self.directory = Path(self._tmp.name)
        self.addCleanup(self._tmp.cleanup)

    def test_run_prints_statistics(self) -> None:
        config = write_config(self.directory, "site.json")
        result = self.runner.invoke(app, ["run", "--config", str(config)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Concurrency factor", result.output)
        self.assertIn("Charging events", result.output)

    def test_invalid_config_is_reported(self) -> None:
        config = write_config(self.directory, "bad.json", arrivalStrategy="Teleport")
        result = self.runner.invoke(app, ["run", "--config", str(config)])
        self.assertNotEqual(result.exit_code, 0)

    def test_export_writes_daily_csv(self) -> None:
        config = write_config(self.directory, "site.json")
        export = self.directory / "out" / "daily.csv"
        result = self.runner.invoke(
            app, ["run", "--config", str(config), "--export", str(export), "--start-date", "2025-01-01"]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        frame = pd.read_csv(export)
        self.assertEqual(list(frame.columns), ["date", "mean_power_kw"])
        self.assertEqual(len(frame), 365)

    def test_compare_uses_file_names(self) -> None:
        first = write_config(self.directory, "small.json")
        second = write_config(self.directory, "large.json", chargepoints=[[{"power": 22}, 4]])
        result = self.runner.invoke(app, ["compare", str(first), str(second)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("small", result.output)
        self.assertIn("large", result.output)


if __name__ == "__main__":
    unittest.main()
