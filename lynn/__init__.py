from .config import Config
from .errors import (
    DivideByZeroOnApply,
    FormatError,
    InputSizeMismatch,
    InvalidTopology,
    NetworkError,
    OutputSizeMismatch,
)
from .evaluate import evaluate_dataset
from .network import Network, Node, Weight, build, initialize, sigmoid
from .trainer import Trainer, setup_logging
from . import persist

__version__ = "0.1.0"

__all__ = [
    "Config",
    "Network",
    "Node",
    "Weight",
    "build",
    "initialize",
    "sigmoid",
    "evaluate_dataset",
    "persist",
    "Trainer",
    "setup_logging",
    "NetworkError",
    "InvalidTopology",
    "InputSizeMismatch",
    "OutputSizeMismatch",
    "FormatError",
    "DivideByZeroOnApply",
]
