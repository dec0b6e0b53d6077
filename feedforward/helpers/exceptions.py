class FeedforwardError(Exception):
    """ Base class for every error raised by the feedforward package
    """


class ShapeMismatch(FeedforwardError, ValueError):
    """ Raised when operand dimensions violate a matrix operation's
    precondition
    """


class InvalidStateTransition(FeedforwardError, RuntimeError):
    """ Raised when a layer operation is called out of the
    forward -> backward -> commit order
    """


class InvalidConstruction(FeedforwardError, ValueError):
    """ Raised when a layer or network is built with non-positive sizes,
    a non-positive learning rate, or layers whose widths do not chain
    """


class InputWidthMismatch(ShapeMismatch, InvalidStateTransition):
    """ Raised when a layer is fed an input whose column count differs from
    its configured number of inputs
    """
