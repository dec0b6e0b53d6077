from .exceptions import (
    FeedforwardError,
    ShapeMismatch,
    InvalidStateTransition,
    InvalidConstruction,
    InputWidthMismatch,
)
from .MatrixOps import Matrix, ensure_matrix

__all__ = [
    "FeedforwardError",
    "ShapeMismatch",
    "InvalidStateTransition",
    "InvalidConstruction",
    "InputWidthMismatch",
    "Matrix",
    "ensure_matrix",
]
