import dataclasses
import unittest

from src.keyvar.domain._init import Const, KaimingUniform, Randn, Uniform
from src.keyvar.domain.utils._weight_initialization import _calculate_fan_in


class TestInitSpecs(unittest.TestCase):
    def test_randn_defaults_to_standard_normal(self):
        spec = Randn()
        self.assertEqual(spec.mean, 0.0)
        self.assertEqual(spec.stdev, 1.0)

    def test_randn_rejects_negative_stdev(self):
        with self.assertRaises(ValueError):
            Randn(mean=0.0, stdev=-1.0)

    def test_uniform_rejects_reversed_bounds(self):
        with self.assertRaises(ValueError):
            Uniform(lo=1.0, up=-1.0)

    def test_uniform_allows_degenerate_interval(self):
        spec = Uniform(lo=0.5, up=0.5)
        self.assertEqual(spec.lo, spec.up)

    def test_specs_are_frozen_values(self):
        c = Const(1.5)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            c.value = 2.0  # type: ignore[misc]
        self.assertEqual(Const(1.5), c)
        self.assertEqual(KaimingUniform(), KaimingUniform())


class TestFanComputation(unittest.TestCase):
    def test_fan_in_conventions(self):
        self.assertEqual(_calculate_fan_in(()), 1)
        self.assertEqual(_calculate_fan_in((7,)), 7)
        self.assertEqual(_calculate_fan_in((4, 3)), 3)
        self.assertEqual(_calculate_fan_in((8, 3, 5, 5)), 75)

    def test_empty_leading_dim_keeps_fan_in(self):
        self.assertEqual(_calculate_fan_in((0, 5)), 5)
        self.assertEqual(_calculate_fan_in((2, 3, 0)), 0)


if __name__ == "__main__":
    unittest.main()
