import logging

from .errors import CyclicGraph

logger = logging.getLogger(__name__)


def topological_order(root):
    """
    Returns every node reachable from ``root`` with each node placed after all
    of its children.

    Iterative depth-first search with an explicit stack, so graph depth is not
    bounded by the interpreter recursion limit. Two sets of nodes are kept:
    ``on_stack`` holds the nodes on the current exploration path and
    ``visited`` holds the nodes that are fully processed. Nodes hash by
    object identity, so ids from different allocators never alias. Reaching a node
    that is still on the path means the graph has a cycle through it and the
    whole traversal is abandoned with CyclicGraph. Reaching a visited node is
    a no-op, which is what lets shared sub-expressions through.
    """
    visited = set()
    on_stack = {root}
    order = []
    # each frame is a node and the iterator over the children it still has to explore
    stack = [(root, iter(root._children))]

    while stack:
        node, pending = stack[-1]
        for child in pending:
            if child in on_stack:
                raise CyclicGraph(
                    f"Cycle detected in autograd graph: node {child.id} is reachable from itself.",
                    node_id=child.id,
                )
            if child not in visited:
                on_stack.add(child)
                stack.append((child, iter(child._children)))
                break
        else:
            stack.pop()
            on_stack.discard(node)
            visited.add(node)
            order.append(node)

    logger.debug("Topological order from node %d covers %d nodes", root.id, len(order))
    return order


def reverse_topological_order(root):
    """Root first: each node comes after every parent it has inside the reachable subgraph."""
    order = topological_order(root)
    order.reverse()
    return order
