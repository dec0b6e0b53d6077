from .MLP import MLP
from .layers import FullyConnectedLayer, OutputDelta, StagedUpdate, LayerState
from .loss import SquaredErrorLoss
from .helpers import (
    Matrix,
    ShapeMismatch,
    InvalidStateTransition,
    InvalidConstruction,
    InputWidthMismatch,
)

__all__ = [
    "MLP",
    "FullyConnectedLayer",
    "OutputDelta",
    "StagedUpdate",
    "LayerState",
    "SquaredErrorLoss",
    "Matrix",
    "ShapeMismatch",
    "InvalidStateTransition",
    "InvalidConstruction",
    "InputWidthMismatch",
]
