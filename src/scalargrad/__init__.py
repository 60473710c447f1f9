__all__ = [
    "autograd_graph",
    "config",
    "engine",
    "errors",
    "losses",
    "module",
    "node",
    "ops",
    "optimizers",
    "trainer",
    "traversal",
    "__version__"
]

# public names re-exported lazily from their submodules
_EXPORTS = {
    "Node": "node",
    "leaf": "node",
    "add": "ops",
    "subtract": "ops",
    "multiply": "ops",
    "divide": "ops",
    "pow": "ops",
    "negate": "ops",
    "tanh": "ops",
    "relu": "ops",
    "backward": "engine",
    "zero_grad": "engine",
    "AutogradGraph": "autograd_graph",
    "CyclicGraph": "errors",
    "DivisionByZero": "errors",
    "DanglingReference": "errors",
    "NumericOverflow": "errors",
}

def __getattr__(name):
    import importlib
    if name in __all__:
        mod = importlib.import_module(f".{name}", __name__)
        globals()[name] = mod  # cache so future lookups are fast
        return mod
    if name in _EXPORTS:
        attr = getattr(importlib.import_module(f".{_EXPORTS[name]}", __name__), name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__():
    return sorted(list(globals().keys()) + __all__ + list(_EXPORTS))

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from . import (
        autograd_graph,
        config,
        engine,
        errors,
        losses,
        module,
        node,
        ops,
        optimizers,
        trainer,
        traversal
    )
__version__ = "0.0.1"
