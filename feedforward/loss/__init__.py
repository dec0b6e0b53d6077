from .SquaredErrorLoss import SquaredErrorLoss

__all__ = ["SquaredErrorLoss"]
