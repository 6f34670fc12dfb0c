"""
Exceptions for invalid configuration, malformed input files and clusterings a metric
cannot score, plus small argument checks.
"""
import logging
from typing import AbstractSet, Any

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """
    Raised when a scorer, metric or command is configured wrongly: a required key is
    missing, a key is unknown, a value has the wrong type or names nothing registered.
    """

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def __str__(self):
        return self.message


class PartitionError(Exception):
    """
    The exception raised when a clustering handed to a scorer is not a valid
    partition for the metric being computed, e.g. an item appears in two clusters
    of a clustering scored by a single-membership metric.
    """

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def __str__(self):
        return self.message


class PartitionMismatchError(PartitionError):
    """
    Raised when the predicted and gold clusterings do not cover the same items but the
    metric requires that they do. The offending items are kept on the exception so that
    batch callers can report them.
    """

    def __init__(self, predicted_only: AbstractSet[Any], gold_only: AbstractSet[Any]):
        self.predicted_only = frozenset(predicted_only)
        self.gold_only = frozenset(gold_only)
        super().__init__(
            "Elements in partitions must match. "
            f"In predicted but not gold: {_format_items(self.predicted_only)}. "
            f"In gold but not predicted: {_format_items(self.gold_only)}"
        )


def _format_items(items: AbstractSet[Any]) -> str:
    # repr-sorted so that messages are stable across runs
    return "{" + ", ".join(sorted(repr(item) for item in items)) + "}"


def check_non_negative(value: float, name: str) -> None:
    if value < 0.0:
        raise ValueError(f"{name} must be non-negative, but got {value}")


class MalformedDocumentError(ConfigurationError):
    """
    Raised for a line of a documents file that cannot be read as a document: invalid JSON,
    a missing cluster field, or clusters that are not lists of mentions.
    """
