class NetworkError(Exception):
    """Base class for every error raised by the network engine."""


class InvalidTopology(NetworkError, ValueError):
    """A layer size is below one, or a graph breaks the layered structure."""


class InputSizeMismatch(NetworkError, ValueError):
    def __init__(self, expected: int, got: int):
        super().__init__(f"Incorrect number of inputs given! Got {got}, expected {expected}")
        self.expected = expected
        self.got = got


class OutputSizeMismatch(NetworkError, ValueError):
    def __init__(self, expected: int, got: int):
        super().__init__(f"Incorrect number of targets given! Got {got}, expected {expected}")
        self.expected = expected
        self.got = got


class FormatError(NetworkError, ValueError):
    """Serialized network text is malformed or truncated."""
    def __init__(self, message: str, line=None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class DivideByZeroOnApply(NetworkError, ZeroDivisionError):
    """apply() was called on a weight or bias with no accumulated contributions."""
