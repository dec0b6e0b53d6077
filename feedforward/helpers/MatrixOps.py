# helpers/MatrixOps.py
import math

import numpy as np

from .exceptions import ShapeMismatch


class Matrix:
    """Dense 2D container of floats. Rows are samples, columns are features."""

    def __init__(self, rows):
        data = [[float(v) for v in row] for row in rows]
        if len(data) == 0 or len(data[0]) == 0:
            raise ShapeMismatch("Matrix needs at least one row and one column")
        width = len(data[0])
        for i, row in enumerate(data):
            if len(row) != width:
                raise ShapeMismatch(
                    f"Ragged rows: row 0 has {width} columns, row {i} has {len(row)}"
                )
        self._data = data

    # -------- construction --------
    @classmethod
    def filled(cls, rows, cols, value):
        if rows < 1 or cols < 1:
            raise ShapeMismatch(f"Cannot build a {rows} x {cols} matrix")
        return cls([[value] * cols for _ in range(rows)])

    @classmethod
    def zeros(cls, rows, cols):
        return cls.filled(rows, cols, 0.0)

    @classmethod
    def ones(cls, rows, cols):
        return cls.filled(rows, cols, 1.0)

    @classmethod
    def from_array(cls, arr):
        """
        Build a Matrix from a numpy array or nested list.
        A 1D input becomes a single row.
        """
        arr = np.asarray(arr, dtype=np.float64)
        if arr.ndim == 1:
            arr = arr.reshape(1, -1)
        if arr.ndim != 2:
            raise ShapeMismatch(f"Expected a 2D array, got shape {arr.shape}")
        return cls(arr.tolist())

    def to_array(self):
        return np.array(self._data, dtype=np.float64)

    # -------- shape / access --------
    @property
    def rows(self):
        return len(self._data)

    @property
    def cols(self):
        return len(self._data[0])

    @property
    def shape(self):
        return (self.rows, self.cols)

    def __getitem__(self, idx):
        i, j = idx
        return self._data[i][j]

    def __setitem__(self, idx, value):
        i, j = idx
        self._data[i][j] = float(value)

    def row(self, i):
        return list(self._data[i])

    def tolist(self):
        return [list(row) for row in self._data]

    def copy(self):
        return Matrix(self._data)

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._data == other._data

    def allclose(self, other, tol=1e-9):
        other = ensure_matrix(other)
        if self.shape != other.shape:
            return False
        for a_row, b_row in zip(self._data, other._data):
            for a, b in zip(a_row, b_row):
                if abs(a - b) > tol:
                    return False
        return True

    # -------- diagnostics --------
    def dump(self):
        """Header line `R x C` followed by one comma-separated line per row."""
        lines = [describe_shape(self)]
        for row in self._data:
            lines.append(",".join(repr(v) for v in row))
        return "\n".join(lines)

    def __str__(self):
        return self.dump()

    def __repr__(self):
        return f"Matrix({self._data!r})"


def ensure_matrix(x):
    """Pass a Matrix through; convert anything array-like."""
    if isinstance(x, Matrix):
        return x
    return Matrix.from_array(x)


def describe_shape(a):
    return f"{a.rows} x {a.cols}"


def _require_same_shape(name, a, b):
    if a.shape != b.shape:
        raise ShapeMismatch(
            f"{name}: shapes differ ({describe_shape(a)} vs {describe_shape(b)})"
        )


# -------- linear algebra --------
def multiply(a, b):
    if a.cols != b.rows:
        raise ShapeMismatch(
            f"multiply: inner dimensions differ ({describe_shape(a)} vs {describe_shape(b)})"
        )
    out = []
    for i in range(a.rows):
        a_row = a._data[i]
        out_row = []
        for j in range(b.cols):
            total = 0.0
            for k in range(a.cols):
                total += a_row[k] * b._data[k][j]
            out_row.append(total)
        out.append(out_row)
    return Matrix(out)


def transpose(a):
    return Matrix([[a._data[j][i] for j in range(a.rows)] for i in range(a.cols)])


def elementwise_multiply(a, b):
    _require_same_shape("elementwise_multiply", a, b)
    return Matrix(
        [[x * y for x, y in zip(a_row, b_row)] for a_row, b_row in zip(a._data, b._data)]
    )


def subtract(a, b):
    _require_same_shape("subtract", a, b)
    return Matrix(
        [[x - y for x, y in zip(a_row, b_row)] for a_row, b_row in zip(a._data, b._data)]
    )


def scale(a, s):
    # returns a new matrix; `a` is left untouched
    return Matrix([[x * s for x in row] for row in a._data])


def add_bias(a, bias):
    if bias.rows != 1 or bias.cols != a.cols:
        raise ShapeMismatch(
            f"add_bias: bias must be 1 x {a.cols}, got {describe_shape(bias)}"
        )
    b = bias._data[0]
    return Matrix([[x + b[j] for j, x in enumerate(row)] for row in a._data])


def sum_rows(a):
    """Column sums as a 1 x C matrix."""
    return Matrix([[sum(a._data[i][j] for i in range(a.rows)) for j in range(a.cols)]])


# -------- activation --------
def _sigmoid(x):
    # branch keeps exp() from overflowing for large |x|
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    e = math.exp(x)
    return e / (1.0 + e)


def _sigmoid_derivative(x):
    # e^(-x) / (1 + e^(-x))^2 is even in x
    e = math.exp(-abs(x))
    return e / ((1.0 + e) ** 2)


def sigmoid(a):
    return Matrix([[_sigmoid(x) for x in row] for row in a._data])


def sigmoid_derivative(a):
    return Matrix([[_sigmoid_derivative(x) for x in row] for row in a._data])
