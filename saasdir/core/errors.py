"""Application exceptions shared by services and routers."""

from __future__ import annotations

from typing import Optional


class DirectoryError(Exception):
    """Base class for directory errors. `message` is safe to show to users."""

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)
        self.message = message


class ValidationError(DirectoryError):
    """Raised when user input does not satisfy the form rules."""

    def __init__(self, message: str = "Validation failed", field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class UploadError(ValidationError):
    """Raised when a logo or product image cannot be accepted or stored."""


class NotFoundError(DirectoryError):
    def __init__(self, resource: str = "resource", resource_id: Optional[str] = None):
        message = f"{resource.capitalize()} not found"
        if resource_id:
            message = f"{message}: {resource_id}"
        super().__init__(message)
        self.resource = resource
        self.resource_id = resource_id


class SlugConflictError(DirectoryError):
    """Raised when an insert loses the race for a slug."""

    def __init__(self, slug: str):
        super().__init__(f"Slug '{slug}' is already taken")
        self.slug = slug
