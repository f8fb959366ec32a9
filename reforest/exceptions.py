from __future__ import annotations

from pathlib import Path


class ReforestError(RuntimeError):
    """Base class for errors raised by the recommendation engine."""


class DatasetNotFoundError(ReforestError):
    """Raised when the species dataset file is absent at ingestion time.

    Attributes:
        path: The path that was looked up.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"Dataset file not found: {self.path}")


class UnsupportedDatasetFormatError(ReforestError):
    """Raised when the dataset file is not a spreadsheet or CSV."""

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(
            f"Unsupported dataset format: {self.path}. "
            "Expected one of .xlsx, .xls or .csv."
        )


class EmptyDatasetError(ReforestError):
    """Raised when a dataset has no rows, or no species to score."""


class DatasetNotLoadedError(ReforestError):
    """Raised when scoring or querying before a dataset has been ingested."""

    def __init__(self) -> None:
        super().__init__("Dataset not loaded. Please upload a dataset first.")


class UnknownScoringStrategyError(ReforestError):
    """Raised when configuration names a scoring strategy that does not exist.

    Attributes:
        name: The strategy name that was requested.
    """

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        super().__init__(
            f"Unknown scoring strategy '{name}'. "
            f"Available strategies: {', '.join(available)}"
        )


class DatasetReadError(ReforestError):
    """Raised when a dataset file exists but cannot be read as a table.

    Attributes:
        path: The file that failed to read.
    """

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        super().__init__(f"Could not read dataset file {self.path}: {reason}")


class DatasetPathNotAllowedError(ReforestError):
    """Raised when a requested dataset path lies outside the dataset directory."""

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"Dataset path is outside the dataset directory: {self.path}")
