from .Layer import Layer, OutputDelta
from .FullyConnectedLayer import FullyConnectedLayer, LayerState, StagedUpdate

__all__ = [
    "Layer",
    "OutputDelta",
    "FullyConnectedLayer",
    "LayerState",
    "StagedUpdate",
]
