"""
Exceptions raised by nutgraph.

Only record ingestion can fail; graph construction and analysis are total
over well-formed input.
"""

from typing import Sequence


class NutgraphError(Exception):
    """Base class for nutgraph errors."""


class IngestionError(NutgraphError):
    """
    The record source could not be opened, parsed or coerced into Records.

    Attributes:
        issues: The notepad errors behind the failure, one per offending cell or column.
    """

    def __init__(self, message: str, issues: Sequence[str] = ()):
        super().__init__(message)
        self.issues = list(issues)
