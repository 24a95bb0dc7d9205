from fastapi import HTTPException
from typing import Any, List, Optional
from menu_planner.schemas.result import ErrorCategory


class CustomException(HTTPException):
    """Base exception class for all custom application exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int,
        category: ErrorCategory,
        headers: Optional[dict] = None,
        details: Optional[Any] = None
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.category = category
        self.details = details


class ResourceNotFoundException(CustomException):
    """Exception raised when a requested resource is not found"""

    def __init__(self, resource_name: str, resource_id: Optional[Any] = None):
        if resource_id:
            message = f"{resource_name} with ID '{resource_id}' was not found."
        else:
            message = f"{resource_name} was not found."

        super().__init__(
            message=message,
            status_code=404,
            category=ErrorCategory.NOT_FOUND
        )


class AuthenticationException(CustomException):
    """Exception raised when authentication fails"""

    def __init__(self, message: str = "Invalid credentials. Access denied."):
        super().__init__(
            message=message,
            status_code=401,
            category=ErrorCategory.AUTHENTICATION,
            headers={"WWW-Authenticate": "Bearer"}
        )


class AuthorizationException(CustomException):
    """Exception raised when user lacks required permissions"""

    def __init__(
        self,
        permission: Optional[str] = None,
        message: Optional[str] = None,
        status_code: int = 403
    ):
        if message:
            error_message = message
        elif permission:
            error_message = permission
        else:
            error_message = "You do not have permission to perform this action."

        super().__init__(
            message=error_message,
            status_code=status_code,
            category=ErrorCategory.AUTHORIZATION
        )


class DuplicateResourceException(CustomException):
    """Exception raised when attempting to create a resource that already exists"""

    def __init__(
        self,
        resource_name: str,
        identifier: Optional[str] = None,
        status_code: int = 409
    ):
        if identifier:
            message = f"{resource_name} with identifier '{identifier}' already exists."
        else:
            message = f"{resource_name} already exists."

        super().__init__(
            message=message,
            status_code=status_code,
            category=ErrorCategory.RESOURCE_CONFLICT
        )


class ConflictException(CustomException):
    """Exception raised when a request collides with existing state"""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=409,
            category=ErrorCategory.RESOURCE_CONFLICT,
            details=details
        )


class ValidationException(CustomException):
    """Exception raised for business logic validation failures"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Any] = None
    ):
        if field:
            error_message = f"Validation failed for '{field}': {message}"
        else:
            error_message = f"Validation failed: {message}"

        super().__init__(
            message=error_message,
            status_code=422,
            category=ErrorCategory.VALIDATION,
            details=details
        )


class BadRequestException(CustomException):
    """Exception raised for malformed or invalid requests"""

    def __init__(self, message: str = "The request is invalid or malformed."):
        super().__init__(
            message=message,
            status_code=400,
            category=ErrorCategory.BAD_REQUEST
        )


class InternalServerException(CustomException):
    """Exception raised for internal server errors"""

    def __init__(self, message: str = "An internal server error occurred."):
        super().__init__(
            message=message,
            status_code=500,
            category=ErrorCategory.INTERNAL
        )


class ExternalServiceException(CustomException):
    """Exception raised when a downstream service fails or misbehaves"""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(
            message=message,
            status_code=status_code,
            category=ErrorCategory.EXTERNAL_SERVICE
        )


# ===== Shopping list generation =====


class NoMealsScheduledException(ValidationException):
    """No scheduled meals fall inside the requested week"""

    def __init__(self, start: Any, end: Any):
        super().__init__(
            f"No menu items scheduled between {start} and {end}. "
            "Please add items to your calendar first."
        )


class MissingRecipesException(ValidationException):
    """One or more scheduled menu items have no recipe"""

    def __init__(self, menu_item_ids: List[int], names: Optional[List[str]] = None):
        self.menu_item_ids = menu_item_ids
        super().__init__(
            f"No recipes found for {len(menu_item_ids)} menu item(s). "
            "Please add recipes to your menu items first.",
            details={"menu_item_ids": menu_item_ids, "names": names or []}
        )


class NoIngredientsException(ValidationException):
    """Aggregation produced no lines at all"""

    def __init__(self):
        super().__init__("No valid ingredients or sides to add to shopping list.")


# ===== Menu generation =====


class OverwriteConfirmationRequiredException(ConflictException):
    """Requested slots already hold scheduled meals"""

    def __init__(self, occupied: List[dict], requested: int):
        self.occupied = occupied
        super().__init__(
            f"{len(occupied)} of {requested} selected meals already have menu plans. "
            "Confirm overwrite to replace them.",
            details={"occupied_slots": occupied}
        )


class GenerationUnavailableException(ExternalServiceException):
    """The menu generator could not produce a response"""

    def __init__(self, message: str = "Menu generation is currently unavailable."):
        super().__init__(message=message, status_code=503)


class NoValidPlansException(ExternalServiceException):
    """The menu generator answered, but nothing it proposed was usable"""

    def __init__(self):
        super().__init__(message="No valid menu plans generated", status_code=502)
