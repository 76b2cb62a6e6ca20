class Weight:
    """Represents a directed connection from a node to one in the next layer."""
    def __init__(self, id, parent, child, value=0.0):
        self.id = id
        self.parent = parent
        self.child = child
        self.value = value

        self.grad = 0.0
        self.grad_count = 0

    def reset_grad(self):
        self.grad = 0.0
        self.grad_count = 0

    def __repr__(self):
        return f"Weight({self.parent}->{self.child}, w={self.value:.2f})"
