"""
Spreadsheet backend interface for the dashboard.
Defines the contract the gateway and writers rely on.
"""

from typing import Protocol, List, Any


class SpreadsheetBackend(Protocol):
    """
    Protocol for the upstream spreadsheet.

    The Google Sheets implementation lives in adapters.sheets; tests use an
    in-memory fake with the same three calls.

    Implementations raise core.errors.UpstreamUnavailable when a read fails
    and core.errors.UpstreamWriteFailed when a write is rejected.
    """

    def read_range(self) -> List[List[str]]:
        """
        Return every row of the configured range as lists of cell strings.

        Rows are not padded: trailing empty cells may be missing.
        An empty sheet returns [].
        """
        ...

    def append_row(self, values: List[Any]) -> int:
        """
        Append one row after the last row of the range.

        Returns:
            Number of cells updated upstream.
        """
        ...

    def update_row(self, row_index: int, values: List[Any]) -> int:
        """
        Overwrite the absolute 1-based row `row_index`.

        Returns:
            Number of cells updated upstream.
        """
        ...
