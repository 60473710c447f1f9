import logging

from .errors import CyclicGraph

logger = logging.getLogger(__name__)


def _flatten(x):
    return list(x) if isinstance(x, (list, tuple)) else [x]


def train_step(model, criterion, optimizer, inputs, targets):
    """
    One gradient-descent step over a batch of samples.

    Gradients are zeroed, the batch is run forward, the loss is
    backpropagated and the optimizer adjusts the parameters. Returns the loss
    value measured before the update, or None when the loss graph turned out
    to be cyclic; the step is skipped and the parameters are left untouched.
    """
    if len(inputs) != len(targets):
        raise ValueError(f"Got {len(inputs)} samples for {len(targets)} targets.")
    optimizer.zero_grad()

    predictions, wanted = [], []
    for x, y in zip(inputs, targets):
        predictions.extend(_flatten(model(x)))
        wanted.extend(_flatten(y))
    loss = criterion(predictions, wanted)

    try:
        loss.backward()
    except CyclicGraph as exc:
        logger.warning("Skipping training step: %s", exc)
        return None
    optimizer.step()
    return loss.value


def fit(model, criterion, optimizer, inputs, targets, epochs):
    """Runs ``train_step`` ``epochs`` times and returns the loss history."""
    history = []
    for epoch in range(epochs):
        loss = train_step(model, criterion, optimizer, inputs, targets)
        history.append(loss)
        if loss is not None:
            logger.info("epoch %d loss %.6f", epoch, loss)
    return history
