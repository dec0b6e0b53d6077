from ..helpers.MatrixOps import ensure_matrix


class Layer:
    # Subclasses override as needed
    def feed_forward(self, x):
        raise NotImplementedError

    def back_propagate(self, layer_prev, layer_next):
        # Stage the weight update for layer_prev; return the staged update
        raise NotImplementedError

    def commit(self):
        # Apply the update staged by the last back_propagate()
        raise NotImplementedError

    def params(self):
        # Return list of parameter matrices (e.g., [W, b])
        return []


class OutputDelta:
    """
    Externally supplied error signal for the output layer.
    Exposes the same `delta` accessor a layer does so it can stand in as
    the output layer's `layer_next`.
    """
    def __init__(self, delta):
        self._delta = ensure_matrix(delta)

    @property
    def delta(self):
        return self._delta.copy()
