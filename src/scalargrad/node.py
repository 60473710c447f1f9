import itertools
import numbers
import weakref

from .config import dtype
from .errors import DanglingReference


class IdAllocator:
    """Monotonic source of node identities. An allocator never hands out the same id twice."""
    __slots__ = ('_counter',)

    def __init__(self, start=0):
        self._counter = itertools.count(start)

    def __call__(self):
        return next(self._counter)


# process-wide allocator for nodes created outside of an AutogradGraph session
_default_ids = IdAllocator()


def default_allocator():
    return _default_ids


class Node:
    """
    A scalar value together with the record of how it was derived.

    Children are held by strong reference, so a node is kept alive by every
    node that consumes it. The optional ``graph`` attribute is a
    ``weakref.proxy`` to the owning AutogradGraph session and never owns it.
    """
    __slots__ = ('_id', '_value', '_grad', '_op', '_children', '_exponent', 'graph', '__weakref__')

    def __init__(self, value, *, op=None, children=(), exponent=None, graph=None):
        if not isinstance(value, numbers.Real):
            raise TypeError(f"Node value must be a real number, got {type(value).__name__}.")
        self._value = dtype(value)
        self._grad = 0.0
        self._op = op
        self._children = list(children)
        self._exponent = exponent
        self.graph = None
        if graph is None:
            self._id = _default_ids()
        else:
            self._init_graph(graph)

    def _init_graph(self, graph):
        # operands already carry a proxy, leaves are handed the session itself
        self.graph = graph if isinstance(graph, weakref.ProxyType) else weakref.proxy(graph)
        try:
            self._id = self.graph.next_id()
            self.graph.add_node_graph(self)
        except ReferenceError as exc:
            raise DanglingReference("Node was created against an AutogradGraph that no longer exists.") from exc

    @property
    def id(self): return self._id
    @property
    def value(self): return self._value
    @property
    def grad(self): return self._grad
    @property
    def op(self): return self._op
    @property
    def children(self): return tuple(self._children)
    @property
    def exponent(self): return self._exponent
    @property
    def is_leaf(self): return self._op is None

    def zero_grad(self):
        """Sets the accumulated gradient back to 0.0."""
        self._grad = 0.0

    def adjust(self, rate):
        """Parameter adjustment step: ``value += rate * grad``."""
        self._value += rate * self._grad

    def backward(self):
        from .engine import backward
        backward(self)

    # --- Operator sugar, plain numbers are promoted to leaves ---
    def __add__(self, other):
        from . import ops
        return ops.add(self, other)
    def __radd__(self, other):
        from . import ops
        return ops.add(other, self)

    def __sub__(self, other):
        from . import ops
        return ops.subtract(self, other)
    def __rsub__(self, other):
        from . import ops
        return ops.subtract(other, self)

    def __mul__(self, other):
        from . import ops
        return ops.multiply(self, other)
    def __rmul__(self, other):
        from . import ops
        return ops.multiply(other, self)

    def __truediv__(self, other):
        from . import ops
        return ops.divide(self, other)
    def __rtruediv__(self, other):
        from . import ops
        return ops.divide(other, self)

    def __pow__(self, exponent):
        if not isinstance(exponent, numbers.Real):
            return NotImplemented
        from . import ops
        return ops.pow(self, exponent)

    def __neg__(self):
        from . import ops
        return ops.negate(self)

    def tanh(self):
        from . import ops
        return ops.tanh(self)

    def relu(self):
        from . import ops
        return ops.relu(self)

    def __repr__(self):
        op = self._op.value if self._op is not None else 'leaf'
        return f"Node(id={self._id}, value={self._value:.6g}, grad={self._grad:.6g}, op={op})"


def leaf(value, *, graph=None):
    """Creates a node with no operation and no children."""
    return Node(value, graph=graph)


def create_derived(value, operation, children, *, exponent=None, graph=None):
    """Creates a node carrying the operation tag and the exact operands used to compute ``value``."""
    return Node(value, op=operation, children=children, exponent=exponent, graph=graph)
