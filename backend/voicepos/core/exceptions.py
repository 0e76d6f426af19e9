"""
Error taxonomy and safe HTTP error construction.

Services raise the domain errors below (POSError subclasses); a single handler
in main renders them as {"detail": message}. Anything else is a server fault:
logged in full internally, reported generically to the caller.
"""
import logging

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


class POSError(Exception):
    """Base class for expected, caller-facing failures."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(POSError):
    pass


class NotFound(POSError):
    status_code = status.HTTP_404_NOT_FOUND


class ProductNotFound(NotFound):
    def __init__(self, reference):
        super().__init__(f"Product not found: {reference}")
        self.reference = reference


class SaleNotFound(NotFound):
    def __init__(self, sale_id):
        super().__init__("Sale not found")
        self.sale_id = sale_id


class Conflict(POSError):
    status_code = status.HTTP_409_CONFLICT


class DuplicateName(Conflict):
    def __init__(self, name: str):
        super().__init__(f"Product '{name}' already exists")
        self.name = name


class DuplicateBarcode(Conflict):
    def __init__(self, barcode: str):
        super().__init__(f"Barcode '{barcode}' is already assigned to another product")
        self.barcode = barcode


class InsufficientStock(POSError):
    def __init__(self, product_name: str, available: int):
        super().__init__(f"Insufficient stock for {product_name}. Available: {available}")
        self.product_name = product_name
        self.available = available


class EmptyCart(POSError):
    def __init__(self):
        super().__init__("No items in cart")


class BusinessError:
    """HTTP exceptions with safe (non-leaky) messages."""

    @staticmethod
    def unauthorized(reason: str = "") -> HTTPException:
        """
        Generic 401 for all authentication failures.

        Same response for wrong password, unknown user or a bad token,
        so callers cannot enumerate accounts.
        """
        logger.warning(f"Unauthorized access attempt: {reason}")
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed",
            headers={"WWW-Authenticate": "Bearer"},
        )

    @staticmethod
    def forbidden(reason: str = "") -> HTTPException:
        logger.warning(f"Forbidden access: {reason}")
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )

    @staticmethod
    def conflict(detail: str) -> HTTPException:
        logger.info(f"Conflict: {detail}")
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
        )

    @staticmethod
    def server_error(original_error: Exception = None) -> HTTPException:
        """
        Generic 500 - logs actual error internally, hides from user.

        Never expose stack traces, SQL errors, or internal paths to users.
        """
        if original_error:
            logger.error(
                f"Internal server error: {type(original_error).__name__}: {str(original_error)}",
                exc_info=original_error,
            )
        else:
            logger.error("Internal server error occurred", exc_info=True)

        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An internal error occurred. Please try again later.",
        )

    @staticmethod
    def rate_limit_exceeded(detail: str = "Too many requests") -> HTTPException:
        logger.warning(f"Rate limit exceeded: {detail}")
        return HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=detail,
        )
