"""
Error taxonomy for the dashboard API.

Every error carries the HTTP status it maps to and a message safe to show
in the browser. The handler registered in main.py turns them into
{"success": false, "error": ..., "message": ...} responses.
"""
from typing import Optional


class DashboardError(Exception):
    """Base class for errors surfaced to API clients."""
    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        # Underlying cause, shown as "message" in the JSON body
        self.detail = detail
        super().__init__(self.message)


class UpstreamUnavailable(DashboardError):
    """Spreadsheet read failed and there is no cached copy to fall back on."""
    status_code = 500
    default_message = "Failed to fetch spreadsheet data"


class ValidationError(DashboardError):
    """Required field missing or empty."""
    status_code = 400
    default_message = "All fields are required"


class Unauthorized(DashboardError):
    """Wrong password, or missing/expired bearer token."""
    status_code = 401
    default_message = "Unauthorized"


class MissingHeaders(DashboardError):
    """The sheet has no header row to build a write from."""
    status_code = 500
    default_message = "Could not read the spreadsheet headers"


class UpstreamWriteFailed(DashboardError):
    """Append/update rejected by the Sheets API."""
    status_code = 500
    default_message = "Failed to write to the spreadsheet"

    def __init__(
        self,
        message: Optional[str] = None,
        detail: Optional[str] = None,
        upstream_status: Optional[int] = None,
    ):
        super().__init__(message, detail)
        self.upstream_status = upstream_status

    @classmethod
    def from_status(cls, upstream_status: Optional[int], detail: Optional[str] = None) -> "UpstreamWriteFailed":
        """Map the upstream HTTP status to a human-readable message."""
        if upstream_status == 403:
            message = "Permission denied. Check the API credentials."
        elif upstream_status == 400:
            message = "Invalid data. Check the submitted fields."
        elif detail:
            message = detail
        else:
            message = None
        return cls(message, detail=detail, upstream_status=upstream_status)
