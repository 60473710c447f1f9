import weakref
from collections import OrderedDict

import torch

from .node import Node, leaf


class Module:
    """
    Base class for all neural network modules.
    """
    __slots__ = ('_parameters', '_modules')

    def __init__(self):
        self._parameters = OrderedDict()
        self._modules = OrderedDict()

    def __setattr__(self, name, value):
        if isinstance(value, Node):
            self._parameters[name] = value
        elif isinstance(value, Module):
            self._modules[name] = value
        super().__setattr__(name, value)

    def register_parameter(self, name, node):
        if not isinstance(node, Node):
            raise TypeError(f"Parameter {name!r} must be a Node, got {type(node).__name__}.")
        self._parameters[name] = node

    def register_module(self, name, module):
        if not isinstance(module, Module):
            raise TypeError(f"Submodule {name!r} must be a Module, got {type(module).__name__}.")
        self._modules[name] = module

    def parameters(self):
        """Returns a list of all parameters in the module and its submodules."""
        params = list(self._parameters.values())
        for module in self._modules.values():
            params.extend(module.parameters())
        return params

    def modules(self):
        """Returns an iterator over all submodules and the module in the network."""
        yield self
        for module in self._modules.values():
            yield from module.modules()

    def zero_grad(self):
        """Sets gradients of all model parameters to zero."""
        for p in self.parameters():
            p.zero_grad()

    def verify_all_graph_references_are_weak(self):
        strong = []
        for p in self.parameters():
            if p.graph is not None and not isinstance(p.graph, weakref.ProxyType):
                strong.append(p)
        for module in self.modules():
            graph = getattr(module, "graph", None)
            if graph is not None and not isinstance(graph, weakref.ProxyType):
                strong.append(module)
        return not strong

    def __call__(self, *args, **kwargs):
        return self.forward(*args, **kwargs)

    def forward(self, *args, **kwargs):
        raise NotImplementedError("Subclasses of Module must implement a forward method.")


class Neuron(Module):
    """Weighted sum of the inputs plus a bias, optionally followed by an activation.
    weights are drawn uniformly from [-1, 1), the bias starts at 0."""
    __slots__ = ('n_inputs', 'activation', 'graph', 'weights', 'bias', '__weakref__')
    _ACTIVATIONS = (None, "relu", "tanh")

    def __new__(cls, n_inputs, *, activation="relu", graph=None, generator=None):
        assert n_inputs > 0
        assert activation in cls._ACTIVATIONS
        return super().__new__(cls)

    def __init__(self, n_inputs, *, activation="relu", graph=None, generator=None):
        super().__init__()
        self.n_inputs = n_inputs
        self.activation = activation
        if graph is not None and not isinstance(graph, weakref.ProxyType):
            graph = weakref.proxy(graph)
        self.graph = graph

        init = torch.empty(n_inputs, dtype=torch.float64).uniform_(-1.0, 1.0, generator=generator)
        self.weights = [leaf(w, graph=self.graph) for w in init.tolist()]
        for i, w in enumerate(self.weights):
            self.register_parameter(f"weight_{i}", w)
        self.bias = leaf(0.0, graph=self.graph)

    def forward(self, inputs):
        if len(inputs) != self.n_inputs:
            raise ValueError(f"Neuron expects {self.n_inputs} inputs, got {len(inputs)}.")
        total = self.bias
        for x, w in zip(inputs, self.weights):
            total = total + w * x
        if self.activation == "relu":
            return total.relu()
        if self.activation == "tanh":
            return total.tanh()
        return total

    def __repr__(self):
        return f"Neuron(n_inputs={self.n_inputs}, activation={self.activation})"


class Layer(Module):
    __slots__ = ('n_inputs', 'n_outputs', 'neurons', '__weakref__')

    def __init__(self, n_inputs, n_outputs, *, activation="relu", graph=None, generator=None):
        super().__init__()
        self.n_inputs = n_inputs
        self.n_outputs = n_outputs
        self.neurons = [Neuron(n_inputs, activation=activation, graph=graph, generator=generator)
                        for _ in range(n_outputs)]
        for i, n in enumerate(self.neurons):
            self.register_module(f"neuron_{i}", n)

    def forward(self, inputs):
        return [n(inputs) for n in self.neurons]

    def __repr__(self):
        return f"Layer(n_inputs={self.n_inputs}, n_outputs={self.n_outputs})"


class MLP(Module):
    """Feed-forward stack of Layers. Hidden layers use ``activation``, the output layer is linear."""
    __slots__ = ('layers', '__weakref__')

    def __init__(self, n_inputs, hidden, n_outputs, *, activation="relu", graph=None, generator=None):
        super().__init__()
        sizes = [n_inputs, *hidden]
        self.layers = [Layer(fan_in, fan_out, activation=activation, graph=graph, generator=generator)
                       for fan_in, fan_out in zip(sizes, sizes[1:])]
        self.layers.append(Layer(sizes[-1], n_outputs, activation=None, graph=graph, generator=generator))
        for i, layer in enumerate(self.layers):
            self.register_module(f"layer_{i}", layer)

    def forward(self, inputs):
        out = list(inputs)
        for layer in self.layers:
            out = layer(out)
        return out

    def __repr__(self):
        return f"MLP([{', '.join(repr(layer) for layer in self.layers)}])"
