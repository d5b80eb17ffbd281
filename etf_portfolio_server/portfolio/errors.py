"""Failures raised while turning a model response into a portfolio."""

from __future__ import annotations


class PortfolioResponseError(Exception):
    """Base class for terminal processing failures. None are retried internally."""

    code = "INVALID_RESPONSE"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        return {"code": self.code, "message": self.message}


class MalformedResponse(PortfolioResponseError):
    code = "MALFORMED_RESPONSE"

    def __init__(self, raw_text: str, reason: str = "Payload is not valid JSON.") -> None:
        self.raw_text = raw_text
        super().__init__(reason)


class SchemaViolation(PortfolioResponseError):
    code = "SCHEMA_VIOLATION"

    def __init__(self, field: str, message: str, index: int | None = None) -> None:
        self.field = field
        self.index = index
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        payload["field"] = self.field
        if self.index is not None:
            payload["index"] = self.index
        return payload


class InvalidAllocation(PortfolioResponseError):
    code = "INVALID_ALLOCATION"

    def __init__(self, total_allocation: float) -> None:
        self.total_allocation = total_allocation
        super().__init__(f"Total allocation must be positive, received {total_allocation:.4f}.")
