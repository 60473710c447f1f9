class Optimizer:
    __slots__ = ('param_groups',)
    def __init__(self, params, defaults):
        self.param_groups = []
        param_list = list(params)

        if not param_list:
            raise ValueError("Optimizer got an empty parameter list.")

        param_group = {'params': param_list, **defaults}
        self.param_groups.append(param_group)

    def step(self):
        raise NotImplementedError

    def zero_grad(self):
        for group in self.param_groups:
            for p in group['params']:
                p.zero_grad()

class SGD(Optimizer):
    __slots__ = ()
    def __new__(cls, params, lr):
        if lr <= 0:
            raise ValueError(f"Learning rate must be positive, got {lr}.")
        return super().__new__(cls)

    def __init__(self, params, lr):
        defaults = {'lr': lr}
        super().__init__(params, defaults)

    def step(self):
        for group in self.param_groups:
            lr = group['lr']
            for p in group['params']:
                # value += -lr * grad
                p.adjust(-lr)
