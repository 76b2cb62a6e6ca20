from .node import Node
from .weight import Weight

__all__ = ["Node", "Weight"]
