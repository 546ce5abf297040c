"""Exceptions raised around the comparison pipeline.

The scoring and explanation core never raises; these are raised by the
catalog loader and the comparison engine that feed it.
"""

from typing import Optional


class RefereeError(Exception):
    """Base class for all referee errors.

    Attributes:
        code: Machine-readable error code.
        details: Optional mapping of field path to message.
    """

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        data = {"error": self.message, "code": self.code}
        if self.details:
            data["details"] = dict(self.details)
        return data


class RequestValidationError(RefereeError):
    """The comparison request is malformed."""
    code = "VALIDATION_ERROR"


class OptionNotFoundError(RefereeError):
    """One or more requested options are not in the catalog."""
    code = "NOT_FOUND"

    def __init__(self, missing_ids: list[str]):
        super().__init__(f"Option(s) not found: {', '.join(missing_ids)}")
        self.missing_ids = missing_ids


class InsufficientOptionsError(RefereeError):
    """Fewer than two options survived integration filtering."""
    code = "VALIDATION_ERROR"


class CatalogError(RefereeError):
    """The reference catalog could not be loaded or is inconsistent."""
    code = "CATALOG_ERROR"
