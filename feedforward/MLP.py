import time
import numpy as np

from .layers import FullyConnectedLayer, OutputDelta
from .loss.SquaredErrorLoss import SquaredErrorLoss
from .helpers.MatrixOps import ensure_matrix
from .helpers.exceptions import InvalidConstruction, InvalidStateTransition
from .helpers.logger import RunLogger


class MLP:
    def __init__(
        self,
        layer_sizes=None,
        layers=None,
        eta=0.5,
        epochs=1000,
        seed=None,
        verbose=1,
    ):
        # Either layer_sizes, e.g. [2, 4, 1] -> two layers (2->4, 4->1),
        # or a prebuilt list of layers ordered from input to output.
        if (layer_sizes is None) == (layers is None):
            raise InvalidConstruction("Pass exactly one of layer_sizes or layers")

        if layers is None:
            if len(layer_sizes) < 2:
                raise InvalidConstruction(
                    f"layer_sizes needs at least two entries, got {list(layer_sizes)}"
                )
            rng = np.random.default_rng(seed)
            layers = [
                FullyConnectedLayer(n_in, n_out, eta, rng=rng)
                for n_in, n_out in zip(layer_sizes[:-1], layer_sizes[1:])
            ]

        layers = list(layers)
        if len(layers) == 0:
            raise InvalidConstruction("An MLP needs at least one layer")
        for i in range(len(layers) - 1):
            if layers[i].num_outputs != layers[i + 1].num_inputs:
                raise InvalidConstruction(
                    f"Layer {i} outputs {layers[i].num_outputs} columns but "
                    f"layer {i + 1} expects {layers[i + 1].num_inputs}"
                )

        self.layers = layers
        self.eta = eta
        self.epochs = epochs
        self.seed = seed
        self.verbose = verbose

    def __repr__(self):
        widths = [self.layers[0].num_inputs] + [L.num_outputs for L in self.layers]
        return f"<MLP layers={'->'.join(str(w) for w in widths)}>"

    # ================== single pass ==================
    def forward(self, x):
        x = ensure_matrix(x)
        for layer in self.layers:
            x = layer.feed_forward(x)
        return x

    def backward(self, output_delta):
        """
        Back-propagates from the output layer down to layer 1. Layer i stages
        the weight update of layer i-1, so layer 0 never back-propagates and
        the output layer's weight is never updated.
        """
        n = len(self.layers)
        staged = []
        for i in reversed(range(1, n)):
            layer_next = OutputDelta(output_delta) if i == n - 1 else self.layers[i + 1]
            staged.append(self.layers[i].back_propagate(self.layers[i - 1], layer_next))
        return staged

    def commit(self):
        # every stage must exist before the first weight is written
        for i in reversed(range(1, len(self.layers))):
            if self.layers[i].staged is None:
                raise InvalidStateTransition(f"Layer {i} has no staged update to commit")
        for i in reversed(range(1, len(self.layers))):
            self.layers[i].commit()

    def train_step(self, x, y, loss_fn=None):
        if loss_fn is None:
            loss_fn = SquaredErrorLoss()
        prediction = self.forward(x)
        loss = loss_fn.forward(prediction, y)
        if len(self.layers) > 1:
            self.backward(loss_fn.backward())
            self.commit()
        return loss

    # ================== inference ==================
    def predict_raw(self, x):
        return self.forward(x).to_array()

    def predict(self, x, threshold=0.5):
        return (self.predict_raw(x) >= threshold).astype(int)

    def evaluate(self, x, y, loss_fn=None, threshold=0.5):
        if loss_fn is None:
            loss_fn = SquaredErrorLoss()
        prediction = self.forward(x)
        loss = loss_fn.forward(prediction, y)
        labels = (prediction.to_array() >= threshold).astype(int)
        acc = float(np.mean(labels == ensure_matrix(y).to_array()))
        return loss, acc

    def parameters(self):
        return [tuple(L.params()) for L in self.layers]

    # ================== training ==================
    def fit(self, x, y, tag="run", runs_root="runs"):
        x = ensure_matrix(x)
        y = ensure_matrix(y)
        loss_fn = SquaredErrorLoss()
        history = {"loss": [], "acc": []}

        logger = RunLogger(root=runs_root, tag=tag) if runs_root is not None else None

        if self.verbose > 0:
            print(f"Starting training for {self.epochs} epochs...")
        for ep in range(1, self.epochs + 1):
            t0 = time.time()
            self.train_step(x, y, loss_fn)

            # end of epoch: evaluate with the updated weights
            train_loss, train_acc = self.evaluate(x, y, loss_fn=loss_fn)
            history["loss"].append(train_loss)
            history["acc"].append(train_acc)

            # logging (console)
            if self.verbose > 0:
                log_interval = max(1, self.epochs // 10)
                if ep % log_interval == 0 or ep == 1 or ep == self.epochs:
                    print(f"Epoch {ep}/{self.epochs} - loss: {train_loss:.6f} - acc: {train_acc:.4f}")

            # logging (files)
            if logger is not None:
                logger.log_epoch(ep, time_s=time.time() - t0, loss=train_loss, acc=train_acc)

        if logger is not None:
            logger.save_json()
            logger.save_summary(self.layers, tag=tag)
            logger.plot_all(history, tag=tag)
        return history
