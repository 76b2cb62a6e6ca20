import math
from typing import Dict, Iterable, Sequence, Tuple

from .network import Network

Example = Tuple[Sequence[float], Sequence[float]]


def evaluate_dataset(network: Network, dataset: Iterable[Example]) -> Dict[str, float]:
    """
    Runs the network over (inputs, targets) pairs without touching gradients.

    Returns the mean per-example loss (sum of 0.5 * squared error over outputs),
    the RMSE over every output value, and the fraction of examples whose
    outputs all round to their targets.
    """
    total_loss = 0.0
    squared_error = 0.0
    num_values = 0
    correct = 0
    total = 0

    for inputs, targets in dataset:
        outputs = network.evaluate(inputs)
        targets = list(targets)
        if len(targets) != len(outputs):
            raise ValueError(f"Expected {len(outputs)} targets, got {len(targets)}")

        diffs = [t - o for t, o in zip(targets, outputs)]
        total_loss += sum(0.5 * d * d for d in diffs)
        squared_error += sum(d * d for d in diffs)
        num_values += len(diffs)

        if all(round(o) == round(t) for t, o in zip(targets, outputs)):
            correct += 1
        total += 1

    if total == 0:
        raise ValueError("Can't evaluate on an empty dataset")

    return {
        "loss": total_loss / total,
        "rmse": math.sqrt(squared_error / num_values),
        "accuracy": correct / total,
    }
