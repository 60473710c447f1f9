import logging
import weakref

import rustworkx as rx

from .errors import CyclicGraph, DanglingReference
from .node import default_allocator

logger = logging.getLogger(__name__)


class AutogradGraph:
    """
    Session for a computation graph.

    Owns the identity allocator of the nodes created against it and mirrors
    their derivation edges (operand -> result) into a rustworkx digraph. The
    mirror stores ``weakref.proxy`` objects only, it never keeps a node alive,
    and a node that is garbage collected drops out of the mirror with its edges.
    Backward passes do not depend on the mirror, it exists for inspection.
    """
    __slots__ = ('graph', '_indices', '_ids', '_check_cycles', '_auto_cleanup', '__weakref__')

    def __init__(self, check_for_cycles=True, auto_cleanup=True, ids=None):
        self.graph = rx.PyDiGraph()
        self._indices = weakref.WeakKeyDictionary()
        self._ids = ids if ids is not None else default_allocator()
        self._check_cycles = check_for_cycles
        self._auto_cleanup = auto_cleanup

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        try:
            if exc_type is None and self._check_cycles and self.check_cycle():
                raise CyclicGraph("Cycle detected in autograd graph on context exit.")
        finally:
            if self._auto_cleanup:
                self.clear()

    def next_id(self):
        return self._ids()

    def add_node_graph(self, node):
        if node in self._indices:
            raise ValueError(f"Node {node.id} is already part of the graph.")
        index = self.graph.add_node(None)
        self.graph[index] = weakref.proxy(node, self._forget_callback(index))
        self._indices[node] = index
        for child in node.children:
            child_index = self._indices.get(child)
            # operands created outside this session are not mirrored
            if child_index is not None:
                self.graph.add_edge(child_index, index, node.op)
        return index

    def _forget_callback(self, index):
        graph_ref = weakref.ref(self)

        def _forget(proxy):
            graph = graph_ref()
            # the slot may have been cleared or handed to another node since
            if graph is not None and graph.graph.has_node(index) and graph.graph[index] is proxy:
                graph.graph.remove_node(index)
        return _forget

    def index_of(self, node):
        try:
            return self._indices[node]
        except KeyError:
            raise ValueError(f"Node {node.id} is not part of this graph.") from None

    def __contains__(self, node):
        return node in self._indices

    def add_edge(self, node_from, node_to, weight=None):
        self.graph.add_edge(self.index_of(node_from), self.index_of(node_to), weight)

    def delete_edge(self, node_from, node_to):
        index_from, index_to = self.index_of(node_from), self.index_of(node_to)
        if not self.graph.has_edge(index_from, index_to):
            raise ValueError("Edge does not exist.")
        self.graph.remove_edge(index_from, index_to)

    def delete_node(self, node):
        self.graph.remove_node(self.index_of(node))
        del self._indices[node]

    def check_cycle(self):
        return not rx.is_directed_acyclic_graph(self.graph)

    @staticmethod
    def _resolve(proxy):
        try:
            # the bound method of a proxy carries the referent itself
            return proxy.__repr__.__self__
        except ReferenceError as exc:
            raise DanglingReference("Autograd graph refers to a node that has been garbage collected.") from exc

    def ancestors(self, node):
        """Live nodes that ``node`` was derived from, in no particular order."""
        return [self._resolve(self.graph[i]) for i in rx.ancestors(self.graph, self.index_of(node))]

    def reverse_toposort_from_node(self, node):
        """Root-first order over ``node`` and its ancestors, computed by rustworkx."""
        index = self.index_of(node)
        predecessors = set(rx.ancestors(self.graph, index))
        predecessors.add(index)
        sub_graph = self.graph.subgraph(sorted(predecessors))
        try:
            order = rx.topological_sort(sub_graph)
        except rx.DAGHasCycle as exc:
            raise CyclicGraph(f"Cycle detected in autograd graph above node {node.id}.", node_id=node.id) from exc
        return [self._resolve(sub_graph[i]) for i in reversed(order)]

    def clear(self):
        self.graph.clear()
        self._indices.clear()
        logger.debug("Autograd graph cleared")

    def __len__(self):
        return self.graph.num_nodes()

    def __repr__(self):
        return f"AutogradGraph(nodes={self.graph.num_nodes()}, edges={self.graph.num_edges()})"
