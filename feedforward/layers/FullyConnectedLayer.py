import enum
import math
import numbers

import numpy as np

from .Layer import Layer
from ..helpers.MatrixOps import (
    Matrix,
    ensure_matrix,
    describe_shape,
    multiply,
    transpose,
    elementwise_multiply,
    subtract,
    scale,
    add_bias,
    sum_rows,
    sigmoid,
    sigmoid_derivative,
)
from ..helpers.exceptions import (
    ShapeMismatch,
    InvalidStateTransition,
    InvalidConstruction,
    InputWidthMismatch,
)


class LayerState(enum.Enum):
    IDLE = "idle"
    FORWARDED = "forwarded"
    BACK_PROPAGATED = "back_propagated"


class StagedUpdate:
    """Candidate weight computed by one layer for the layer behind it."""

    def __init__(self, target, candidate_weight):
        self.target = target
        self.candidate_weight = candidate_weight

    def apply(self):
        self.target.assign_weight(self.candidate_weight)


class FullyConnectedLayer(Layer):
    def __init__(self, num_inputs, num_outputs, eta, rng=None):
        # weights: (num_inputs, num_outputs)
        # bias: (1, num_outputs), broadcast across rows
        for name, value in (("num_inputs", num_inputs), ("num_outputs", num_outputs)):
            if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
                raise InvalidConstruction(f"{name} must be a positive integer, got {value!r}")
        if isinstance(eta, bool) or not isinstance(eta, numbers.Real) or not 0 < eta < math.inf:
            raise InvalidConstruction(f"eta must be a positive number, got {eta!r}")

        self._num_inputs = int(num_inputs)
        self._num_outputs = int(num_outputs)
        self._eta = float(eta)

        # independent uniform draws in [-1, 1); all-ones bias
        rng = np.random.default_rng(rng)
        self._weight = Matrix.from_array(
            rng.uniform(-1.0, 1.0, size=(self._num_inputs, self._num_outputs))
        )
        self._bias = Matrix.ones(1, self._num_outputs)

        # per-pass caches
        self._input = None
        self._activated_input = None
        self._output = None
        self._delta = None

        self._state = LayerState.IDLE
        self._staged = None
        self._incoming = None

    def __repr__(self):
        return (
            f"<FullyConnectedLayer num_inputs={self._num_inputs}, "
            f"num_outputs={self._num_outputs}, eta={self._eta}>"
        )

    # -------- forward --------
    def feed_forward(self, x):
        """
        Activates the raw input with the sigmoid, then multiplies by the
        weights and adds the bias. The returned output is the next layer's
        input; activation happens on entry to each layer, not on exit.
        """
        x = ensure_matrix(x)
        if x.cols != self._num_inputs:
            raise InputWidthMismatch(
                f"Layer expects {self._num_inputs} input columns, got {describe_shape(x)}"
            )
        if self._staged is not None:
            raise InvalidStateTransition("feed_forward called before commit()")
        if self._incoming is not None:
            raise InvalidStateTransition(
                "feed_forward called while an update staged for this layer is uncommitted"
            )

        activated = sigmoid(x)
        output = add_bias(multiply(activated, self._weight), self._bias)

        self._input = x.copy()
        self._activated_input = activated
        self._output = output
        self._delta = None
        self._state = LayerState.FORWARDED
        return output.copy()

    # -------- backward --------
    def back_propagate(self, layer_prev, layer_next):
        """
        Assumes the whole network has already been fed forward.
        Takes the delta of the layer in front, computes this layer's delta,
        commits the bias step of the PREVIOUS layer immediately and stages
        its weight step until commit().
        The bias step subtracts eta times the row sum of delta, the batch
        gradient; for a single-row batch this is exactly b - eta * delta.
        """
        if self._state is not LayerState.FORWARDED:
            raise InvalidStateTransition(
                f"back_propagate needs a fresh forward pass, layer is {self._state.value}"
            )
        next_delta = layer_next.delta
        if next_delta is None:
            raise InvalidStateTransition("layer_next has no delta; back-propagate it first")
        prev_input = layer_prev.input
        if prev_input is None:
            raise InvalidStateTransition("layer_prev has not been fed forward")

        error = multiply(next_delta, transpose(self._weight))
        delta = elementwise_multiply(error, sigmoid_derivative(self._input))
        gradient = multiply(transpose(prev_input), delta)
        candidate = subtract(layer_prev.weight, scale(gradient, self._eta))
        new_prev_bias = subtract(layer_prev.bias, scale(sum_rows(delta), self._eta))

        # nothing is written until every step above succeeded
        layer_prev.assign_bias(new_prev_bias)
        self._delta = delta
        self._staged = StagedUpdate(layer_prev, candidate)
        layer_prev.mark_incoming(self._staged)
        self._state = LayerState.BACK_PROPAGATED
        return self._staged

    def commit(self):
        if self._staged is None:
            raise InvalidStateTransition("commit() called with no staged update")
        staged = self._staged
        staged.apply()
        staged.target.clear_incoming()
        self._staged = None
        self._state = LayerState.IDLE

    # -------- neighbour writes --------
    def assign_weight(self, weight):
        weight = ensure_matrix(weight)
        if weight.shape != (self._num_inputs, self._num_outputs):
            raise ShapeMismatch(
                f"weight must be {self._num_inputs} x {self._num_outputs}, "
                f"got {describe_shape(weight)}"
            )
        self._weight = weight.copy()

    def assign_bias(self, bias):
        bias = ensure_matrix(bias)
        if bias.shape != (1, self._num_outputs):
            raise ShapeMismatch(
                f"bias must be 1 x {self._num_outputs}, got {describe_shape(bias)}"
            )
        self._bias = bias.copy()

    def mark_incoming(self, staged):
        # blocks feed_forward until the staged weight lands
        self._incoming = staged

    def clear_incoming(self):
        self._incoming = None

    # -------- read-only snapshots --------
    @property
    def num_inputs(self):
        return self._num_inputs

    @property
    def num_outputs(self):
        return self._num_outputs

    @property
    def eta(self):
        return self._eta

    @property
    def state(self):
        return self._state

    @property
    def staged(self):
        return self._staged

    @property
    def weight(self):
        return self._weight.copy()

    @property
    def bias(self):
        return self._bias.copy()

    @property
    def input(self):
        return None if self._input is None else self._input.copy()

    @property
    def activated_input(self):
        return None if self._activated_input is None else self._activated_input.copy()

    @property
    def output(self):
        return None if self._output is None else self._output.copy()

    @property
    def delta(self):
        return None if self._delta is None else self._delta.copy()

    def params(self):
        return [self.weight, self.bias]
