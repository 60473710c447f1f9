import enum
import math
import numbers

from .errors import DivisionByZero, NumericOverflow
from .node import Node, create_derived, leaf


class Operation(enum.Enum):
    """Closed set of differentiable primitives. Each member keys a gradient rule."""
    ADD = 'add'
    SUB = 'sub'
    MUL = 'mul'
    POW = 'pow'
    TANH = 'tanh'
    RELU = 'relu'


def _graph_of(*nodes):
    for n in nodes:
        if n.graph is not None:
            return n.graph
    return None


def _as_node(x, graph=None):
    if isinstance(x, Node):
        return x
    if isinstance(x, numbers.Real):
        return leaf(x, graph=graph)
    raise TypeError(f"Expected a Node or a real number, got {type(x).__name__}.")


def _operands(a, b):
    # numbers join the session of whichever operand is a node
    graph = _graph_of(*(x for x in (a, b) if isinstance(x, Node)))
    return _as_node(a, graph), _as_node(b, graph)


# --- Forward constructors ---

def add(a, b):
    a, b = _operands(a, b)
    return create_derived(a.value + b.value, Operation.ADD, (a, b), graph=_graph_of(a, b))


def subtract(a, b):
    a, b = _operands(a, b)
    return create_derived(a.value - b.value, Operation.SUB, (a, b), graph=_graph_of(a, b))


def multiply(a, b):
    a, b = _operands(a, b)
    return create_derived(a.value * b.value, Operation.MUL, (a, b), graph=_graph_of(a, b))


def pow(a, exponent):
    """
    ``a ** exponent`` where the exponent is a plain number attached to the node.

    The derivative factor ``a ** (exponent - 1)`` used by the backward rule is
    checked here as well, so a node that was built can always be differentiated.
    """
    if isinstance(exponent, Node) or not isinstance(exponent, numbers.Real):
        raise TypeError("Exponent must be a plain real number, not a graph node.")
    a = _as_node(a)
    exponent = float(exponent)
    base = a.value
    if base == 0.0 and exponent < 0:
        raise DivisionByZero(f"0 cannot be raised to the negative power {exponent}.")
    if base < 0.0 and not exponent.is_integer():
        raise ValueError(f"Negative base {base} with non-integer exponent {exponent} has no real result.")
    try:
        value = base ** exponent
        if exponent != 0.0:
            base ** (exponent - 1)
    except ZeroDivisionError as exc:
        raise DivisionByZero(f"Derivative of {base} ** {exponent} is unbounded at a zero base.") from exc
    except OverflowError as exc:
        raise NumericOverflow(f"{base} ** {exponent} is out of floating point range.") from exc
    return create_derived(value, Operation.POW, (a,), exponent=exponent, graph=a.graph)


def divide(a, b):
    """``a * b ** -1``. A divisor whose value is exactly 0 is rejected before any node is built."""
    a, b = _operands(a, b)
    if b.value == 0.0:
        raise DivisionByZero(f"Division by a node with value 0 (node id {b.id}).")
    return multiply(a, pow(b, -1))


def negate(a):
    a = _as_node(a)
    return multiply(a, leaf(-1.0, graph=a.graph))


def tanh(a):
    a = _as_node(a)
    return create_derived(math.tanh(a.value), Operation.TANH, (a,), graph=a.graph)


def relu(a):
    a = _as_node(a)
    return create_derived(max(a.value, 0.0), Operation.RELU, (a,), graph=a.graph)


# --- Gradient accumulation rules ---
# Every rule adds into the children's gradients, a child may be reached
# through several parents during one pass.

def _add_backward(node):
    a, b = node._children
    a._grad += node._grad
    b._grad += node._grad


def _sub_backward(node):
    a, b = node._children
    a._grad += node._grad
    b._grad -= node._grad


def _mul_backward(node):
    a, b = node._children
    a._grad += node._grad * b._value
    b._grad += node._grad * a._value


def _pow_backward(node):
    a, = node._children
    k = node._exponent
    if k == 0.0:
        return
    a._grad += node._grad * k * a._value ** (k - 1)


def _tanh_backward(node):
    x, = node._children
    t = math.tanh(x._value)
    x._grad += node._grad * (1.0 - t * t)


def _relu_backward(node):
    x, = node._children
    x._grad += node._grad * (1.0 if node._value > 0 else 0.0)


GRADIENT_RULES = {
    Operation.ADD: _add_backward,
    Operation.SUB: _sub_backward,
    Operation.MUL: _mul_backward,
    Operation.POW: _pow_backward,
    Operation.TANH: _tanh_backward,
    Operation.RELU: _relu_backward,
}


def accumulate(node):
    """Pushes ``node.grad`` into its children. Leaves are terminal."""
    if node._op is None:
        return
    GRADIENT_RULES[node._op](node)
