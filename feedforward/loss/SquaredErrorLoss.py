from ..helpers.MatrixOps import ensure_matrix, subtract, scale
from ..helpers.exceptions import ShapeMismatch, InvalidStateTransition


class SquaredErrorLoss:
    def __init__(self):
        # cache from forward
        self.diff = None
        self.m = None

    def forward(self, prediction, target):
        """
        prediction: (batch, outputs) -- raw output of the last layer
        target: (batch, outputs)
        returns: 0.5 * sum((prediction - target)^2) / batch
        """
        prediction = ensure_matrix(prediction)
        target = ensure_matrix(target)
        if prediction.shape != target.shape:
            raise ShapeMismatch(
                f"prediction is {prediction.rows} x {prediction.cols}, "
                f"target is {target.rows} x {target.cols}"
            )

        self.m = prediction.rows
        self.diff = subtract(prediction, target)

        total = 0.0
        for i in range(self.diff.rows):
            for j in range(self.diff.cols):
                total += self.diff[i, j] ** 2
        return 0.5 * total / self.m

    def backward(self):
        """
        dL/dprediction = (prediction - target) / m
        This is the delta handed to the output layer.
        """
        if self.diff is None or self.m is None:
            raise InvalidStateTransition("Must call forward() before backward()")
        return scale(self.diff, 1.0 / self.m)
