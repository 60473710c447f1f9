from .module import Module
from .node import Node


class MSE(Module):
    """Squared error between predictions and targets, averaged (``reduction='mean'``) or summed."""
    __slots__ = ('reduction', '__weakref__')
    _REDUCTIONS = ("mean", "sum")

    def __new__(cls, *, reduction="mean"):
        assert reduction in cls._REDUCTIONS
        return super().__new__(cls)

    def __init__(self, *, reduction="mean"):
        super().__init__()
        self.reduction = reduction

    def forward(self, predictions, targets):
        if isinstance(predictions, Node):
            predictions = [predictions]
        if not isinstance(targets, (list, tuple)):
            targets = [targets]
        if len(predictions) != len(targets):
            raise ValueError(f"Got {len(predictions)} predictions for {len(targets)} targets.")
        if not predictions:
            raise ValueError("MSE needs at least one prediction.")

        loss = None
        for p, t in zip(predictions, targets):
            squared_error = (p - t) ** 2
            loss = squared_error if loss is None else loss + squared_error
        if self.reduction == "mean" and len(predictions) > 1:
            loss = loss / len(predictions)
        return loss
