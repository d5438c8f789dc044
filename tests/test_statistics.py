import unittest

from chargesim.core.defaults import default_config
from chargesim.core.statistics import compute_statistics, events_energy_kwh
from chargesim.models.config import ChargepointType
from chargesim.models.results import ChargingEvent, PerTickRecord, SimulationResult


class ComputeStatisticsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.config = default_config(
            simulation_granularity_ms=30 * 60 * 1000,
            chargepoints=((ChargepointType(power=11.0), 2),),
        )

    def test_energy_peak_and_concurrency(self) -> None:
        records = [
            PerTickRecord((11.0, 0.0)),
            PerTickRecord((11.0, 11.0)),
            PerTickRecord((0.0, 11.0)),
            PerTickRecord((0.0, 0.0)),
        ]
        statistics = compute_statistics(self.config, records)
        self.assertAlmostEqual(statistics.total_energy_kwh, 22.0)
        self.assertAlmostEqual(statistics.theoretical_max_power_kw, 22.0)
        self.assertAlmostEqual(statistics.actual_max_power_kw, 22.0)
        self.assertAlmostEqual(statistics.concurrency_factor, 1.0)

    def test_partial_concurrency(self) -> None:
        statistics = compute_statistics(self.config, [PerTickRecord((11.0, 0.0)), PerTickRecord((0.0, 11.0))])
        self.assertAlmostEqual(statistics.concurrency_factor, 0.5)
        self.assertEqual(
            statistics.to_dict(),
            {
                "total_energy_kwh": 11.0,
                "theoretical_max_power_kw": 22.0,
                "actual_max_power_kw": 11.0,
                "concurrency_factor": 0.5,
            },
        )

    def test_no_installed_power(self) -> None:
        config = self.config.with_updates(chargepoints=())
        statistics = compute_statistics(config, [PerTickRecord(()), PerTickRecord(())])
        self.assertEqual(statistics.theoretical_max_power_kw, 0.0)
        self.assertEqual(statistics.actual_max_power_kw, 0.0)
        self.assertEqual(statistics.concurrency_factor, 0.0)

    def test_empty_telemetry(self) -> None:
        statistics = compute_statistics(self.config, [])
        self.assertEqual(statistics.total_energy_kwh, 0.0)
        self.assertEqual(statistics.actual_max_power_kw, 0.0)
        self.assertEqual(statistics.concurrency_factor, 0.0)


class EventsEnergyTests(unittest.TestCase):
    def test_energy_from_event_durations(self) -> None:
        config = default_config(
            simulation_granularity_ms=30 * 60 * 1000,
            chargepoints=((ChargepointType(power=11.0), 1), (ChargepointType(power=22.0), 1)),
        )
        result = SimulationResult(
            per_tick_data=(),
            charging_events=(ChargingEvent(0, 0, 4), ChargingEvent(1, 2, 3)),
        )
        self.assertAlmostEqual(events_energy_kwh(config, result), 4 * 11.0 * 0.5 + 22.0 * 0.5)
        self.assertEqual(events_energy_kwh(config, SimulationResult((), ())), 0.0)


if __name__ == "__main__":
    unittest.main()
