# catalogy/core/errors.py
"""
Error taxonomy shared by every Catalogy component.

Each error carries:
  - code:        short machine-readable identifier (also used as "reason")
  - message:     human-readable description (replaced by public_message
                 in responses when the class sets one)
  - http_status: status used by the FastAPI exception handler

Store-level errors (ConflictError, StorageError) are raised by the
document store backends; services decide whether to propagate or absorb
them.
"""


class CatalogyError(Exception):
    """Base class for all Catalogy errors."""

    code = "error"
    http_status = 500
    # Message shown to callers when `message` may carry internal details
    public_message: str | None = None

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_response(self) -> dict:
        return {
            "ok": False,
            "message": self.public_message or self.message,
            "code": self.code,
        }


class ConfigurationError(CatalogyError):
    """Required startup settings are missing or invalid."""

    code = "configuration"
    http_status = 500
    public_message = "Server configuration error"


class ValidationError(CatalogyError):
    """Caller input is malformed."""

    code = "validation"
    http_status = 400


class NotFoundError(CatalogyError):
    code = "not_found"
    http_status = 404


class ConflictError(CatalogyError):
    """A record with the same key already exists, or a conditional write lost."""

    code = "conflict"
    http_status = 409


class StorageError(CatalogyError):
    """Transient backend failure."""

    code = "storage"
    http_status = 500
    public_message = "Storage backend error"
