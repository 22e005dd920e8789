import unittest

import numpy as np

from src.keyvar.domain._errors import VariableCopyError, VariableNotFoundError
from src.keyvar.domain._init import Const
from src.keyvar.domain._var_store import IVarStore
from src.keyvar.domain.device._device import Device
from src.keyvar.infrastructure.store import VarStore
from src.keyvar.infrastructure.tensor import Tensor


def _build(vs: VarStore) -> dict:
    root = vs.root()
    enc = root / "encoder"
    return {
        "encoder|w": enc.kaiming_uniform("w", (4, 3)),
        "encoder|b": enc.zeros("b", (4,)),
        "encoder|running_mean": enc.zeros_no_train("running_mean", (4,)),
        "head|w": (root / "head").randn_standard("w", (2, 4)),
        "step": root.ones_no_train("step", ()),
    }


class TestVarStoreBasics(unittest.TestCase):
    def test_new_store_is_empty(self):
        vs = VarStore("cpu")
        self.assertEqual(vs.device, Device("cpu"))
        self.assertEqual(len(vs), 0)
        self.assertTrue(vs.is_empty())
        self.assertEqual(vs.trainable_variables(), [])
        self.assertEqual(vs.variables(), {})

    def test_device_accepts_descriptor_or_string(self):
        self.assertEqual(VarStore(Device("cpu")).device, VarStore("cpu").device)
        self.assertEqual(VarStore("cuda:1").device, Device("cuda:1"))

    def test_invalid_device_string(self):
        with self.assertRaises(ValueError):
            VarStore("tpu")

    def test_cuda_store_cannot_allocate(self):
        vs = VarStore("cuda:0")
        with self.assertRaises(RuntimeError):
            vs.root().zeros("w", (1,))
        self.assertTrue(vs.is_empty())

    def test_satisfies_store_protocol(self):
        self.assertIsInstance(VarStore("cpu"), IVarStore)

    def test_repr_mentions_device_and_count(self):
        vs = VarStore("cpu")
        vs.root().zeros("w", (1,))
        self.assertEqual(repr(vs), "VarStore(device=cpu, variables=1)")


class TestVarStoreEnumeration(unittest.TestCase):
    def setUp(self) -> None:
        np.random.seed(0)
        self.vs = VarStore("cpu")
        self.created = _build(self.vs)

    def test_variables_snapshot_names(self):
        self.assertEqual(set(self.vs.variables()), set(self.created))
        self.assertEqual(len(self.vs), 5)
        self.assertIn("encoder|w", self.vs)
        self.assertNotIn("w", self.vs)

    def test_variables_share_storage_with_creators(self):
        for name, t in self.vs.variables().items():
            with self.subTest(name=name):
                self.assertTrue(t.is_same_storage(self.created[name]))

    def test_trainable_variables_are_exactly_trainable_ones(self):
        trainable = self.vs.trainable_variables()
        expected = {"encoder|w", "encoder|b", "head|w"}
        self.assertEqual(len(trainable), len(expected))
        for name in expected:
            self.assertTrue(
                any(t.is_same_storage(self.created[name]) for t in trainable), name
            )

    def test_trainable_variables_returns_handles_not_copies(self):
        for t in self.vs.trainable_variables():
            t.set_requires_grad(False)
        self.assertFalse(self.created["encoder|w"].requires_grad)
        self.assertFalse(self.created["head|w"].requires_grad)

    def test_snapshot_is_detached_from_later_inserts(self):
        snap = self.vs.variables()
        self.vs.root().zeros("late", (1,))
        self.assertNotIn("late", snap)
        self.assertIn("late", self.vs)

    def test_scenario_one_trainable(self):
        vs = VarStore(Device("cpu"))
        w = vs.root().var("w", [2, 2], Const(0.0))
        vs.root().zeros_no_train("b", [2])
        trainable = vs.trainable_variables()
        self.assertEqual(len(trainable), 1)
        self.assertEqual(trainable[0].shape, (2, 2))
        self.assertTrue(trainable[0].is_same_storage(w))


class TestVarStoreFreeze(unittest.TestCase):
    def setUp(self) -> None:
        self.vs = VarStore("cpu")
        self.created = _build(self.vs)

    def _grad_state(self) -> dict:
        return {name: t.requires_grad for name, t in self.vs.variables().items()}

    def test_freeze_disables_grad_on_trainable_only(self):
        self.vs.freeze()
        state = self._grad_state()
        self.assertFalse(any(state.values()))
        # classification unchanged
        self.assertEqual(len(self.vs.trainable_variables()), 3)

    def test_freeze_is_idempotent(self):
        self.vs.freeze()
        once = self._grad_state()
        self.vs.freeze()
        self.assertEqual(self._grad_state(), once)

    def test_unfreeze_restores_exactly_trainable_set(self):
        before = self._grad_state()
        self.vs.freeze()
        self.vs.unfreeze()
        self.assertEqual(self._grad_state(), before)
        self.assertFalse(self.created["encoder|running_mean"].requires_grad)
        self.assertFalse(self.created["step"].requires_grad)

    def test_unfreeze_is_idempotent(self):
        self.vs.unfreeze()
        once = self._grad_state()
        self.vs.unfreeze()
        self.assertEqual(self._grad_state(), once)

    def test_freeze_visible_through_caller_handles(self):
        self.vs.freeze()
        self.assertFalse(self.created["encoder|w"].requires_grad)
        self.vs.unfreeze()
        self.assertTrue(self.created["encoder|w"].requires_grad)

    def test_trainable_count_stable_across_toggles(self):
        for _ in range(3):
            self.vs.freeze()
            self.assertEqual(len(self.vs.trainable_variables()), 3)
            self.vs.unfreeze()
            self.assertEqual(len(self.vs.trainable_variables()), 3)


class TestVarStoreCopy(unittest.TestCase):
    def test_copy_values_by_name(self):
        np.random.seed(3)
        src = VarStore("cpu")
        src_vars = _build(src)
        src.root().zeros("extra", (9,))

        dst = VarStore("cpu")
        dst_vars = _build(dst)
        dst.copy(src)

        for name, t in dst_vars.items():
            with self.subTest(name=name):
                np.testing.assert_array_equal(t.to_numpy(), src_vars[name].to_numpy())
                self.assertFalse(t.is_same_storage(src_vars[name]))
        self.assertNotIn("extra", dst)
        self.assertTrue(dst_vars["encoder|w"].requires_grad)

    def test_copy_missing_name(self):
        src = VarStore("cpu")
        src.root().zeros("a", (1,))
        dst = VarStore("cpu")
        dst.root().zeros("a", (1,))
        dst.root().zeros("b", (1,))
        with self.assertRaises(VariableNotFoundError) as ctx:
            dst.copy(src)
        self.assertEqual(ctx.exception.name, "b")
        self.assertIs(ctx.exception.source, src)

    def test_copy_shape_mismatch_wrapped(self):
        src = VarStore("cpu")
        src.root().zeros("a", (2,))
        dst = VarStore("cpu")
        dst.root().zeros("a", (3,))
        with self.assertRaises(VariableCopyError) as ctx:
            dst.copy(src)
        self.assertEqual(ctx.exception.name, "a")
        self.assertIsInstance(ctx.exception.__cause__, ValueError)

    def test_copy_from_itself_is_noop(self):
        vs = VarStore("cpu")
        w = vs.root().var("w", (2,), Const(3.0))
        vs.copy(vs)
        np.testing.assert_array_equal(w.to_numpy(), [3.0, 3.0])


class TestVarStoreAdd(unittest.TestCase):
    def test_add_external_tensor(self):
        vs = VarStore("cpu")
        t = Tensor.full((3,), 2.0, device="cpu")
        out = (vs.root() / "ext").add("t", t, True)
        self.assertIs(out, t)
        self.assertTrue(vs.variables()["ext|t"].is_same_storage(t))
        self.assertEqual(len(vs.trainable_variables()), 1)


if __name__ == "__main__":
    unittest.main()
