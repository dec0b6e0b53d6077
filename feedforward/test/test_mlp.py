import contextlib
import io
import json
import math
import pathlib
import tempfile
import unittest

import numpy as np

from feedforward import MLP, FullyConnectedLayer, SquaredErrorLoss
from feedforward.helpers.exceptions import InvalidConstruction, InvalidStateTransition


def sig(x):
    return 1.0 / (1.0 + math.exp(-x))


class TestConstruction(unittest.TestCase):

    def test_from_layer_sizes(self):
        model = MLP(layer_sizes=[2, 3, 1], eta=0.1, seed=0, verbose=0)
        self.assertEqual(len(model.layers), 2)
        self.assertEqual(
            [(L.num_inputs, L.num_outputs) for L in model.layers], [(2, 3), (3, 1)]
        )
        self.assertEqual(repr(model), "<MLP layers=2->3->1>")

    def test_seed_is_reproducible(self):
        a = MLP(layer_sizes=[2, 3, 1], seed=7, verbose=0)
        b = MLP(layer_sizes=[2, 3, 1], seed=7, verbose=0)
        for (wa, ba), (wb, bb) in zip(a.parameters(), b.parameters()):
            self.assertEqual(wa, wb)
            self.assertEqual(ba, bb)

    def test_parameters_follow_layers(self):
        model = MLP(layer_sizes=[2, 3, 1], seed=0, verbose=0)
        params = model.parameters()
        self.assertEqual(len(params), 2)
        for (weight, bias), L in zip(params, model.layers):
            self.assertEqual(weight, L.weight)
            self.assertEqual(bias, L.bias)

    def test_invalid_construction(self):
        with self.assertRaises(InvalidConstruction):
            MLP()
        with self.assertRaises(InvalidConstruction):
            MLP(layer_sizes=[2, 3, 1], eta=float("nan"))
        with self.assertRaises(InvalidConstruction):
            MLP(layer_sizes=[2])
        with self.assertRaises(InvalidConstruction):
            MLP(layers=[])
        with self.assertRaises(InvalidConstruction):
            MLP(layers=[FullyConnectedLayer(2, 3, 1, rng=0), FullyConnectedLayer(2, 1, 1, rng=0)])
        with self.assertRaises(InvalidConstruction):
            MLP(layer_sizes=[2, 0, 1])


class TestPass(unittest.TestCase):

    def setUp(self):
        self.eta = 0.25
        first = FullyConnectedLayer(2, 2, self.eta, rng=0)
        second = FullyConnectedLayer(2, 1, self.eta, rng=0)
        first.assign_weight([[0.5, -0.5], [0.25, 0.75]])
        first.assign_bias([[0.0, 0.0]])
        second.assign_weight([[1.0], [1.0]])
        second.assign_bias([[0.0]])
        self.model = MLP(layers=[first, second], eta=self.eta, verbose=0)

    def test_forward_pipes_outputs(self):
        out = self.model.forward([[1, 1]])

        h0 = sig(1) * 0.75
        h1 = sig(1) * 0.25
        self.assertAlmostEqual(out[0, 0], sig(h0) + sig(h1), places=12)
        self.assertEqual(self.model.layers[1].input, self.model.layers[0].output)

    def test_backward_then_commit_updates_first_layer_only(self):
        self.model.forward([[1, 1]])
        w0 = self.model.layers[0].weight
        w1 = self.model.layers[1].weight

        staged = self.model.backward([[0.1]])

        self.assertEqual(len(staged), 1)
        self.assertEqual(self.model.layers[0].weight, w0)

        self.model.commit()

        delta = self.model.layers[1].delta
        expected = [
            [w0[r, c] - self.eta * 1.0 * delta[0, c] for c in range(2)] for r in range(2)
        ]
        self.assertTrue(self.model.layers[0].weight.allclose(expected, tol=1e-12))
        self.assertEqual(self.model.layers[1].weight, w1)

    def test_commit_without_backward_raises(self):
        self.model.forward([[1, 1]])
        with self.assertRaises(InvalidStateTransition):
            self.model.commit()

    def test_train_step_returns_loss(self):
        loss_fn = SquaredErrorLoss()
        prediction = self.model.forward([[1, 1]])
        expected = 0.5 * (prediction[0, 0] - 1.0) ** 2

        loss = self.model.train_step([[1, 1]], [[1.0]], loss_fn)

        self.assertAlmostEqual(loss, expected, places=12)
        # a fresh pass can start once the step is committed
        self.model.forward([[0, 1]])

    def test_single_layer_has_nothing_to_train(self):
        layer = FullyConnectedLayer(2, 1, 0.5, rng=0)
        model = MLP(layers=[layer], verbose=0)
        weight = layer.weight
        model.train_step([[1, 0]], [[1.0]])
        self.assertEqual(layer.weight, weight)


class TestFit(unittest.TestCase):

    def setUp(self):
        self.x = np.array([[0, 0], [0, 1], [1, 0], [1, 1]])
        self.y = np.array([[0], [1], [1], [0]])

    def test_fit_without_run_directory(self):
        model = MLP(layer_sizes=[2, 3, 1, 1], eta=0.5, epochs=5, seed=0, verbose=0)
        history = model.fit(self.x, self.y, runs_root=None)

        self.assertEqual(len(history["loss"]), 5)
        self.assertEqual(len(history["acc"]), 5)
        self.assertTrue(all(np.isfinite(history["loss"])))

        for L, n_in, n_out in zip(model.layers, [2, 3, 1], [3, 1, 1]):
            self.assertEqual(L.weight.shape, (n_in, n_out))

    def test_fit_writes_run_directory(self):
        model = MLP(layer_sizes=[2, 2, 1], eta=0.5, epochs=3, seed=0, verbose=0)
        with tempfile.TemporaryDirectory() as root:
            model.fit(self.x, self.y, tag="xor", runs_root=root)

            (run_dir,) = list(pathlib.Path(root).iterdir())
            self.assertTrue(run_dir.name.startswith("xor_"))
            with open(run_dir / "history.json") as f:
                metrics = json.load(f)
            self.assertEqual([m["epoch"] for m in metrics], [1, 2, 3])
            self.assertTrue((run_dir / "history.csv").exists())
            self.assertTrue((run_dir / "layers.txt").exists())
            self.assertTrue((run_dir / "plots" / "loss_curve_xor_epochs_3.png").exists())

    def test_predict_and_evaluate(self):
        model = MLP(layer_sizes=[2, 2, 1], eta=0.5, epochs=1, seed=0, verbose=0)
        preds = model.predict(self.x)
        self.assertEqual(preds.shape, (4, 1))
        self.assertTrue(set(np.unique(preds)) <= {0, 1})

        loss, acc = model.evaluate(self.x, self.y)
        self.assertGreaterEqual(loss, 0.0)
        self.assertAlmostEqual(acc, float(np.mean(preds == self.y)))

    def test_verbose_prints_progress(self):
        model = MLP(layer_sizes=[2, 2, 1], eta=0.5, epochs=2, seed=0, verbose=1)
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            model.fit(self.x, self.y, runs_root=None)
        self.assertIn("Starting training for 2 epochs...", buf.getvalue())
        self.assertIn("Epoch 2/2", buf.getvalue())


if __name__ == '__main__':
    unittest.main()
