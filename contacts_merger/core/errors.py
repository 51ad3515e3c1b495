from typing import Optional


class ContactsError(Exception):
    """Base class for errors raised by the contacts merger"""

    code = "CONTACTS_ERROR"

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint


class NotFoundError(ContactsError):
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}")
        self.resource = resource
        self.identifier = identifier


class ValidationError(ContactsError):
    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        super().__init__(f"Validation error for {field}: {message}")
        self.field = field


class DirectoryError(ContactsError):
    """Raised when the contact directory cannot read or write a record"""

    code = "DIRECTORY_ERROR"
