import math
import unittest

import numpy as np

from src.keyvar.infrastructure.tensor import Tensor
from src.keyvar.infrastructure.utils.weight_initializer import WeightInitializer


class TestWeightInitializerRegistry(unittest.TestCase):
    def setUp(self) -> None:
        np.random.seed(0)

    def test_builtin_initializers_registered(self):
        names = tuple(n for n in WeightInitializer.available() if not n.startswith("__"))
        self.assertEqual(names, ("const", "kaiming_uniform", "randn", "uniform"))

    def test_unknown_initializer_raises_value_error(self):
        with self.assertRaises(ValueError) as ctx:
            WeightInitializer("___does_not_exist___")
        msg = str(ctx.exception)
        self.assertIn("Unsupported initializer name", msg)
        self.assertIn("Available:", msg)

    def test_register_initializer_no_overwrite_by_default(self):
        name = "__unit_test_initializer__"
        self.addCleanup(WeightInitializer.INITIALIZERS.pop, name, None)

        @WeightInitializer.register_initializer(name, overwrite=True)
        def init_a(tensor):
            return tensor

        with self.assertRaises(ValueError):

            @WeightInitializer.register_initializer(name)
            def init_b(tensor):
                return tensor

        self.assertIs(WeightInitializer.get(name), init_a)

    def test_register_rejects_empty_name(self):
        with self.assertRaises(ValueError):
            WeightInitializer.register_initializer("")

    def test_dispatch_forwards_arguments(self):
        t = Tensor((2, 3), "cpu")
        out = WeightInitializer("const")(t, 4.0)
        self.assertIs(out, t)
        np.testing.assert_allclose(t.to_numpy(), np.full((2, 3), 4.0))

    def test_const_overwrites_previous_values(self):
        t = Tensor.full((3,), 9.0, device="cpu")
        WeightInitializer("const")(t, 0.0)
        np.testing.assert_allclose(t.to_numpy(), np.zeros(3))

    def test_uniform_within_bounds(self):
        t = Tensor((1000,), "cpu")
        WeightInitializer("uniform")(t, -0.25, 0.75)
        arr = t.to_numpy()
        self.assertGreaterEqual(float(arr.min()), -0.25)
        self.assertLessEqual(float(arr.max()), 0.75)

    def test_randn_moments(self):
        t = Tensor((20000,), "cpu")
        WeightInitializer("randn")(t, 3.0, 0.5)
        arr = t.to_numpy()
        self.assertAlmostEqual(float(arr.mean()), 3.0, delta=0.02)
        self.assertAlmostEqual(float(arr.std()), 0.5, delta=0.02)

    def test_kaiming_uniform_bound_from_fan_in(self):
        t = Tensor((64, 24), "cpu")
        WeightInitializer("kaiming_uniform")(t)
        bound = math.sqrt(6.0 / 24.0)
        arr = t.to_numpy()
        self.assertLessEqual(float(np.abs(arr).max()), bound + 1e-6)
        # a uniform sample of 1536 values spreads close to the bound
        self.assertGreater(float(np.abs(arr).max()), 0.9 * bound)

    def test_initializers_keep_dtype(self):
        t = Tensor((4, 4), "cpu")
        for name in ("randn", "kaiming_uniform"):
            with self.subTest(initializer=name):
                WeightInitializer(name)(t)
                self.assertEqual(t.dtype, np.float32)


if __name__ == "__main__":
    unittest.main()
