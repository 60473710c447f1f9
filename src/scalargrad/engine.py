import logging

from .errors import CyclicGraph
from .node import Node
from .ops import accumulate
from .traversal import reverse_topological_order

logger = logging.getLogger(__name__)


def backward(root):
    """
    Computes d(root)/d(node) for every node reachable from ``root``.

    The root gradient is seeded with 1.0 and each node's accumulation rule
    runs exactly once, root first. Gradients are added to whatever the nodes
    already hold, call ``zero_grad`` between passes.

    Raises CyclicGraph if the reachable subgraph is not a DAG. In that case no
    gradient other than the seed has been touched.
    """
    if not isinstance(root, Node):
        raise TypeError(f"backward() expects a Node, got {type(root).__name__}.")
    root._grad = 1.0
    try:
        order = reverse_topological_order(root)
    except CyclicGraph as exc:
        logger.error("Backward pass from node %d aborted: %s", root.id, exc)
        raise

    for node in order:
        accumulate(node)
    logger.debug("Backward pass from node %d propagated through %d nodes", root.id, len(order))


def zero_grad(nodes):
    """Resets the gradient of every given node to 0.0."""
    for node in nodes:
        node.zero_grad()
