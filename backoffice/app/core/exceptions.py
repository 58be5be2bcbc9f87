"""
Custom exceptions and error handlers for consistent error responses.

Every failure is rendered as the common envelope:
{"message": ..., "status": false, "data": null, "error": <code>, "details": {...}}
"""

import logging
from decimal import Decimal
from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from typing import Any, Dict

logger = logging.getLogger("backoffice")


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class InvalidAmountError(AppException):
    """Raised when an amount is not a positive finite number."""

    def __init__(self, amount: Any = None):
        super().__init__(
            message="Amount must be a positive number",
            error_code="INVALID_AMOUNT",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"amount": str(amount)}
        )


class PartyNotFoundError(AppException):
    """Raised when a ledger-bearing party does not exist."""

    def __init__(self, party_id: Any, party_type: str = None):
        label = party_type.title() if party_type else "Party"
        super().__init__(
            message=f"{label} with ID {party_id} not found",
            error_code="PARTY_NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"party_id": party_id, "party_type": party_type}
        )


class InsufficientBalanceError(AppException):
    """Raised when a debit would take a party below zero and the policy forbids it."""

    def __init__(self, party_id: int, required: Decimal, available: Decimal):
        self.party_id = party_id
        self.required = required
        self.available = available
        super().__init__(
            message=f"Insufficient balance for party {party_id}: required {required}, available {available}",
            error_code="INSUFFICIENT_BALANCE",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"party_id": party_id, "required": str(required), "available": str(available)}
        )


class AlreadyProcessedError(AppException):
    """Raised when a state transition that moves money was already applied."""

    def __init__(self, message: str, details: Dict[str, Any] = None, error_code: str = "ALREADY_PROCESSED"):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class AlreadyApprovedError(AlreadyProcessedError):
    """Raised when approving a payment request that is already approved."""

    def __init__(self, request_id: int):
        super().__init__(
            message="Payment request is already approved",
            details={"payment_request_id": request_id},
            error_code="ALREADY_APPROVED"
        )


class VehicleAlreadySoldError(AppException):
    """Raised when selling a vehicle whose sale status is not PENDING."""

    def __init__(self, vehicle_id: int, chassis_no: str = None):
        super().__init__(
            message=f"Vehicle {chassis_no or vehicle_id} is already sold",
            error_code="VEHICLE_ALREADY_SOLD",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"vehicle_id": vehicle_id, "chassis_no": chassis_no}
        )


class RecordNotFoundError(AppException):
    """Raised when requested business record is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="RECORD_NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class ConstraintConflictError(AppException):
    """Raised when a write violates a unique or foreign key constraint."""

    def __init__(self, message: str = "Record conflicts with existing data", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="CONSTRAINT_CONFLICT",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class StoreUnavailableError(AppException):
    """Raised when the atomic unit cannot complete against the store (timeout, driver failure)."""

    def __init__(self, message: str = "Transaction could not be completed, retry later", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="STORE_UNAVAILABLE",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details
        )


def _envelope(message: str, error_code: str, details: Dict[str, Any] = None) -> Dict[str, Any]:
    return {
        "message": message,
        "status": False,
        "data": None,
        "error": error_code,
        "details": jsonable_encoder(details or {}),
    }


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_envelope(exc.message, exc.error_code, exc.details)
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    # Map status code to error code
    error_code_map = {
        400: "BAD_REQUEST",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        500: "INTERNAL_SERVER_ERROR"
    }

    error_code = error_code_map.get(exc.status_code, "UNKNOWN")

    return JSONResponse(
        status_code=exc.status_code,
        content=_envelope(str(exc.detail), error_code)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope("Validation error", "VALIDATION_ERROR", {"errors": exc.errors()})
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope("An internal server error occurred", "INTERNAL_SERVER_ERROR")
    )
