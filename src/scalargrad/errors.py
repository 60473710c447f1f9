class ScalarGradError(Exception):
    """Base class for errors raised by the autograd engine."""


class DivisionByZero(ScalarGradError, ZeroDivisionError):
    """Raised when an operation would divide by a node whose value is exactly 0."""


class CyclicGraph(ScalarGradError, RuntimeError):
    """Raised when the graph reachable from a backward root is not a DAG."""

    def __init__(self, message="Cycle detected in autograd graph.", node_id=None):
        super().__init__(message)
        self.node_id = node_id


class DanglingReference(ScalarGradError, ReferenceError):
    """Raised when a recorded back-reference no longer resolves to a live object."""


class NumericOverflow(ScalarGradError, OverflowError):
    """Raised when an operation's value, or the derivative its backward rule needs, is not representable."""
