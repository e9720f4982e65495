"""Custom exception hierarchy for the holdings service."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Hierarchy errors
    ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"
    VIEW_LOCATION_NOT_FOUND = "VIEW_LOCATION_NOT_FOUND"

    # Folder errors
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"

    # Selected view errors
    SELECTED_VIEW_NOT_FOUND = "SELECTED_VIEW_NOT_FOUND"
    VIEW_ALREADY_SELECTED = "VIEW_ALREADY_SELECTED"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"


class HoldingsException(Exception):
    """
    Base exception for all holdings service errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class EntityNotFoundError(HoldingsException):
    """Hierarchy record (shareholder, company, project, table or view) not found."""

    def __init__(self, level: str, entity_id: str):
        super().__init__(
            f"{level.capitalize()} not found: {entity_id}",
            ErrorCode.ENTITY_NOT_FOUND,
            status_code=404,
            details={"level": level, "id": entity_id}
        )


class FolderNotFoundError(HoldingsException):
    """Folder not found in database."""

    def __init__(self, folder_id: str):
        super().__init__(
            f"Folder not found: {folder_id}",
            ErrorCode.FOLDER_NOT_FOUND,
            status_code=404,
            details={"folder_id": folder_id}
        )


class SelectedViewNotFoundError(HoldingsException):
    """Selected-view row not found in database."""

    def __init__(self, selected_id: str):
        super().__init__(
            f"Selected view not found: {selected_id}",
            ErrorCode.SELECTED_VIEW_NOT_FOUND,
            status_code=404,
            details={"id": selected_id}
        )


class ViewLocationNotFoundError(HoldingsException):
    """View is missing or one of its ancestor links is broken."""

    def __init__(self, view_id: str):
        super().__init__(
            f"View location not found: {view_id}",
            ErrorCode.VIEW_LOCATION_NOT_FOUND,
            status_code=404,
            details={"view_id": view_id}
        )


# Clients match on this message to special-case re-selection.
VIEW_ALREADY_SELECTED_MESSAGE = "View is already selected"


class ViewAlreadySelectedError(HoldingsException):
    """A selected-view row already references this view."""

    def __init__(self, view_id: str, selected_id: Optional[str] = None):
        details: Dict[str, Any] = {"view_id": view_id}
        if selected_id:
            details["selected_id"] = selected_id
        super().__init__(
            VIEW_ALREADY_SELECTED_MESSAGE,
            ErrorCode.VIEW_ALREADY_SELECTED,
            status_code=409,
            details=details
        )


class ValidationError(HoldingsException):
    """Validation failed for user input."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class DatabaseError(HoldingsException):
    """Database operation failed."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message,
            ErrorCode.DATABASE_ERROR,
            status_code=500,
            details=details
        )
