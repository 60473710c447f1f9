import math

import numpy as np
import pytest

from scalargrad import ops
from scalargrad.autograd_graph import AutogradGraph
from scalargrad.config import GRADCHECK_EPS
from scalargrad.node import Node

OP_KINDS = ("add", "sub", "mul", "div", "tanh", "relu", "pow")


@pytest.fixture
def graph():
    with AutogradGraph() as g:
        yield g


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


def random_program(rng, n_leaves, n_ops):
    """A straight-line program; every instruction reads two earlier slots."""
    program = []
    for i in range(n_ops):
        size = n_leaves + i
        kind = OP_KINDS[int(rng.integers(len(OP_KINDS)))]
        program.append((kind, int(rng.integers(size)), int(rng.integers(size))))
    return program


def run_program(program, inputs):
    """Evaluates ``program`` over floats or over Nodes; the last slot is the output."""
    symbolic = isinstance(inputs[0], Node)
    slots = list(inputs)
    for kind, i, j in program:
        x, y = slots[i], slots[j]
        if kind == "add":
            out = x + y
        elif kind == "sub":
            out = x - y
        elif kind == "mul":
            out = x * y
        elif kind == "div":
            out = x / (y * y + 1.0)
        elif kind == "tanh":
            out = ops.tanh(x) if symbolic else math.tanh(x)
        elif kind == "relu":
            out = ops.relu(x) if symbolic else max(x, 0.0)
        else:
            out = x ** 2
        slots.append(out)
    return slots[-1]


def numerical_gradient(program, values, eps=GRADCHECK_EPS):
    """Centered finite differences of the program output w.r.t. every input."""
    grads = []
    for k in range(len(values)):
        up, down = list(values), list(values)
        up[k] += eps
        down[k] -= eps
        grads.append((run_program(program, up) - run_program(program, down)) / (2 * eps))
    return np.array(grads)
