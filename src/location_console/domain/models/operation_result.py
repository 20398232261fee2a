"""Operation result domain model."""

from pydantic import BaseModel, ConfigDict


class OperationResult(BaseModel):
    """Outcome of a user-triggered operation, rendered as a notification."""

    model_config = ConfigDict(frozen=True)

    success: bool
    title: str
    message: str

    @classmethod
    def ok(cls, title: str, message: str) -> "OperationResult":
        """Build a successful result."""
        return cls(success=True, title=title, message=message)

    @classmethod
    def failed(cls, title: str, message: str) -> "OperationResult":
        """Build a failed result."""
        return cls(success=False, title=title, message=message)
