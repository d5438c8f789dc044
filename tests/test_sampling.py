import unittest

from chargesim.core.demand import ChargingDemandSampler
from chargesim.core.random_source import SeededRandomSource


class FixedRandom:
    """Random source replaying a fixed list of draws."""

    def __init__(self, *values: float) -> None:
        self.values = list(values)

    def next(self) -> float:
        return self.values.pop(0)


class SeededRandomSourceTests(unittest.TestCase):
    def test_same_seed_same_sequence(self) -> None:
        first = SeededRandomSource(42)
        second = SeededRandomSource(42)
        self.assertEqual([first.next() for _ in range(100)], [second.next() for _ in range(100)])

    def test_different_seeds_diverge(self) -> None:
        first = [SeededRandomSource(1).next() for _ in range(5)]
        second = [SeededRandomSource(2).next() for _ in range(5)]
        self.assertNotEqual(first, second)

    def test_values_in_unit_interval(self) -> None:
        rng = SeededRandomSource()
        for _ in range(1000):
            value = rng.next()
            self.assertGreaterEqual(value, 0.0)
            self.assertLess(value, 1.0)

    def test_negative_seed_rejected(self) -> None:
        with self.assertRaises(ValueError):
            SeededRandomSource(-1)


class ChargingDemandSamplerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.sampler = ChargingDemandSampler([(10.0, 0.2), (20.0, 0.3)])

    def test_cumulative_table(self) -> None:
        self.assertEqual([km for km, _ in self.sampler.cumulative], [10.0, 20.0])
        self.assertAlmostEqual(self.sampler.cumulative[-1][1], 0.5)

    def test_first_entry_exceeding_draw(self) -> None:
        self.assertEqual(self.sampler.sample(FixedRandom(0.1)), 10.0)
        self.assertEqual(self.sampler.sample(FixedRandom(0.2)), 20.0)
        self.assertEqual(self.sampler.sample(FixedRandom(0.49)), 20.0)

    def test_unassigned_mass_falls_back_to_last_entry(self) -> None:
        self.assertEqual(self.sampler.sample(FixedRandom(0.75)), 20.0)

    def test_zero_distance_means_no_charge(self) -> None:
        sampler = ChargingDemandSampler([(0.0, 0.5), (50.0, 0.5)])
        self.assertEqual(sampler.sample(FixedRandom(0.3)), 0.0)
        self.assertEqual(sampler.sample(FixedRandom(0.6)), 50.0)

    def test_empty_distribution_never_charges(self) -> None:
        self.assertEqual(ChargingDemandSampler([]).sample(FixedRandom()), 0.0)


if __name__ == "__main__":
    unittest.main()
