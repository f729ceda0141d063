class ClearMLError(ValueError):
    """Base class for invalid input passed to a clear_ml entry point."""


class EmptyVector(ClearMLError):
    """A sequence required to be non-empty was empty."""

    def __init__(self, name: str = "input") -> None:
        super().__init__(f"{name} must not be empty.")
        self.name = name


class DimensionMismatch(ClearMLError):
    """Two sequences required to have equal length did not."""

    def __init__(self, name: str, expected: int, actual: int) -> None:
        super().__init__(f"{name}: expected length {expected}, got {actual}.")
        self.name = name
        self.expected = expected
        self.actual = actual
