import unittest

from chargesim.core.statistics import compute_statistics, events_energy_kwh
from chargesim.core.validator import ConfigurationError
from chargesim.engine import SimulationEngine, simulate
from chargesim.models.config import ArrivalAtHour, ArrivalStrategy, SimulationConfig
from chargesim.models.results import ChargingEvent

HOUR_MS = 60 * 60 * 1000


def single_chargepoint_config(hourly, strategy=ArrivalStrategy.NO_ARRIVAL_IF_OCCUPIED, seed=1) -> SimulationConfig:
    return SimulationConfig(
        simulation_granularity_ms=HOUR_MS,
        chargepoints=(({"power": 11.0}, 1),),
        arrival_at_hour={"probability_distribution": hourly},
        charging_needs={"probability_distribution": ((100.0, 1.0),)},
        car_consumption_kwh_per_100km=18.0,
        arrival_strategy=strategy,
        seed=seed,
    )


class SimulationEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        # One car per day at midnight needing 18 kWh from an 11 kW chargepoint.
        self.config = single_chargepoint_config([1.0] + [0.0] * 23)

    def test_daily_arrival_scenario(self) -> None:
        result = simulate(self.config)

        self.assertEqual(len(result.per_tick_data), 365 * 24)
        self.assertEqual(result.charging_events[0], ChargingEvent(chargepoint_id=0, start_tick=0, end_tick=2))
        self.assertEqual(len(result.charging_events), 365)
        self.assertEqual(result.per_tick_data[0].power_demands_per_chargepoint_kw, (11.0,))
        self.assertEqual(result.per_tick_data[1].power_demands_per_chargepoint_kw, (11.0,))
        self.assertEqual(result.per_tick_data[2].power_demands_per_chargepoint_kw, (0.0,))

        statistics = compute_statistics(self.config, result.per_tick_data)
        self.assertAlmostEqual(statistics.theoretical_max_power_kw, 11.0)
        self.assertAlmostEqual(statistics.actual_max_power_kw, 11.0)
        self.assertAlmostEqual(statistics.total_energy_kwh, 8030.0)
        self.assertAlmostEqual(statistics.concurrency_factor, 1.0)
        self.assertAlmostEqual(events_energy_kwh(self.config, result), statistics.total_energy_kwh)

    def test_events_are_emitted_in_end_tick_order(self) -> None:
        result = simulate(self.config)
        end_ticks = [event.end_tick for event in result.charging_events]
        self.assertEqual(end_ticks, sorted(end_ticks))
        for event in result.charging_events:
            self.assertGreater(event.end_tick, event.start_tick)

    def test_same_seed_is_deterministic(self) -> None:
        config = single_chargepoint_config([0.3] * 24, seed=11)
        self.assertEqual(simulate(config), simulate(config))

    def test_arrival_probability_only_on_hour_boundaries(self) -> None:
        config = SimulationConfig(
            simulation_granularity_ms=15 * 60 * 1000,
            chargepoints=(({"power": 11.0}, 1),),
            arrival_at_hour={"probability_distribution": [0.5] * 24, "multiplier": 2.0},
            charging_needs={"probability_distribution": ((10.0, 1.0),)},
            car_consumption_kwh_per_100km=18.0,
        )
        engine = SimulationEngine(config)
        self.assertAlmostEqual(engine.arrival_probability(0), 1.0)
        self.assertEqual(engine.arrival_probability(1), 0.0)
        self.assertEqual(engine.arrival_probability(3), 0.0)
        self.assertAlmostEqual(engine.arrival_probability(4), 1.0)

    def test_concurrency_factor_is_bounded(self) -> None:
        config = SimulationConfig(
            simulation_granularity_ms=HOUR_MS,
            chargepoints=(({"power": 11.0}, 4), ({"power": 22.0}, 2)),
            arrival_at_hour={"probability_distribution": [0.2] * 24},
            charging_needs={"probability_distribution": ((0.0, 0.3), (50.0, 0.4), (150.0, 0.3))},
            car_consumption_kwh_per_100km=18.0,
            seed=5,
        )
        statistics = compute_statistics(config, simulate(config).per_tick_data)
        self.assertGreaterEqual(statistics.concurrency_factor, 0.0)
        self.assertLessEqual(statistics.concurrency_factor, 1.0)
        self.assertLessEqual(statistics.actual_max_power_kw, 88.0)

    def test_queueing_policy_keeps_every_arrival(self) -> None:
        dropping = SimulationEngine(single_chargepoint_config([1.0] * 24))
        dropped = dropping.run()
        self.assertEqual(dropping.state.arrivals, 4380)
        self.assertEqual(len(dropped.charging_events), 4379)
        self.assertEqual(dropping.policy.queued_vehicles, 0)

        queueing = SimulationEngine(
            single_chargepoint_config([1.0] * 24, strategy=ArrivalStrategy.PER_CHARGEPOINT_QUEUE)
        )
        queued = queueing.run()
        self.assertEqual(queueing.state.arrivals, 365 * 24)
        self.assertGreaterEqual(len(queued.charging_events), len(dropped.charging_events))
        self.assertGreater(queueing.policy.queued_vehicles, 0)

    def test_progress_callback_reports_each_day(self) -> None:
        calls = []
        simulate(self.config, progress_callback=lambda done, total, message: calls.append((done, total, message)))
        self.assertEqual(len(calls), 365)
        self.assertEqual(calls[0], (24, 8760, "Simulated day 1/365"))
        self.assertEqual(calls[-1], (8760, 8760, "Simulated day 365/365"))

    def test_unvalidated_config_is_rejected(self) -> None:
        broken_hours = SimulationConfig.model_construct(
            **{**dict(self.config), "arrival_at_hour": ArrivalAtHour.model_construct(
                probability_distribution=tuple([0.1] * 23), multiplier=1.0
            )}
        )
        with self.assertRaises(ConfigurationError):
            SimulationEngine(broken_hours)

        broken_strategy = SimulationConfig.model_construct(**{**dict(self.config), "arrival_strategy": "Bogus"})
        with self.assertRaises(ConfigurationError):
            simulate(broken_strategy)


if __name__ == "__main__":
    unittest.main()
