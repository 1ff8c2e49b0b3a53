from typing import Any


class AppError(Exception):
    status_code = 500
    default_code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


class ValidationError(AppError):
    """Malformed input: bad ids, non-positive hours, out-of-range periods."""

    status_code = 400
    default_code = "VALIDATION_ERROR"


class NotFoundError(AppError):
    status_code = 404
    default_code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} with ID '{entity_id}' not found", details={"entity": entity, "id": str(entity_id)})


class BusinessRuleError(AppError):
    """Domain rule violated before any write happened."""

    status_code = 409
    default_code = "BUSINESS_RULE_VIOLATION"
