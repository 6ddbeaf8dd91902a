"""Exception hierarchy for LedgerDesk.

Every domain error derives from ``LedgerDeskException`` and carries a stable
error code, an HTTP status and optional details, so the API layer can render
them without knowing the concrete type.

Error codes follow pattern: [CATEGORY][NUMBER]
- CUS: Customer errors (001-099)
- PRD: Product errors (100-199)
- DOC: Invoice/quote errors (200-299)
- FX:  Exchange rate errors (300-399)
- SET: Settings errors (400-499)
"""

from __future__ import annotations

from typing import Any


class LedgerDeskException(Exception):
    """Base exception for all LedgerDesk application errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response format."""
        return {
            "error": {
                "message": self.message,
                "code": self.code,
                "details": self.details,
            }
        }


class InvalidCurrencyError(LedgerDeskException):
    """Currency code outside the supported list."""

    def __init__(self, currency: str | None):
        super().__init__(
            message=f"Invalid or unsupported currency code: {currency!r}",
            code="FX300",
            status_code=400,
            details={"currency": currency},
        )


# ============================================================================
# CUSTOMER ERRORS (CUS001-099)
# ============================================================================

class CustomerError(LedgerDeskException):
    """Base class for customer errors."""
    pass


class CustomerNotFoundError(CustomerError):
    def __init__(self, public_customer_id: str | None = None):
        message = "Customer not found" if not public_customer_id else f"Customer {public_customer_id} not found"
        super().__init__(
            message=message,
            code="CUS001",
            status_code=404,
            details={"public_customer_id": public_customer_id} if public_customer_id else {},
        )


class CustomerEmailExistsError(CustomerError):
    def __init__(self, email: str):
        super().__init__(
            message=f"A customer with email {email} already exists",
            code="CUS002",
            status_code=409,
            details={"email": email},
        )


# ============================================================================
# PRODUCT ERRORS (PRD100-199)
# ============================================================================

class ProductError(LedgerDeskException):
    """Base class for product errors."""
    pass


class ProductNotFoundError(ProductError):
    def __init__(self, sku: str | None = None):
        message = "Product not found" if not sku else f"Product {sku} not found"
        super().__init__(
            message=message,
            code="PRD100",
            status_code=404,
            details={"sku": sku} if sku else {},
        )


class InvalidAdditionalPriceError(ProductError):
    """Additional price list conflicts with the base price or itself."""

    def __init__(self, message: str, currency: str):
        super().__init__(
            message=message,
            code="PRD101",
            status_code=400,
            details={"currency": currency},
        )


class CodeGenerationError(LedgerDeskException):
    """No unique code could be produced within the retry bound."""

    def __init__(self, kind: str, reason: str):
        super().__init__(
            message=f"Failed to generate a unique {kind}: {reason}",
            code="PRD102",
            status_code=500,
            details={"kind": kind},
        )


# ============================================================================
# DOCUMENT ERRORS (DOC200-299)
# ============================================================================

class DocumentError(LedgerDeskException):
    """Base class for invoice and quote errors."""
    pass


class InvoiceNotFoundError(DocumentError):
    def __init__(self, invoice_id: int | str | None = None):
        message = "Invoice not found" if invoice_id is None else f"Invoice {invoice_id} not found"
        super().__init__(
            message=message,
            code="DOC200",
            status_code=404,
            details={"invoice_id": invoice_id} if invoice_id is not None else {},
        )


class QuoteNotFoundError(DocumentError):
    def __init__(self, quote_id: int | str | None = None):
        message = "Quote not found" if quote_id is None else f"Quote {quote_id} not found"
        super().__init__(
            message=message,
            code="DOC201",
            status_code=404,
            details={"quote_id": quote_id} if quote_id is not None else {},
        )


class InvalidDocumentStatusError(DocumentError):
    """Unsupported status value or a transition that is not allowed."""

    def __init__(self, document: str, status: str, reason: str | None = None):
        message = f"Invalid {document} status: '{status}'"
        if reason:
            message = f"{message}. {reason}"
        super().__init__(
            message=message,
            code="DOC202",
            status_code=400,
            details={"document": document, "status": status},
        )


class QuoteConversionError(DocumentError):
    def __init__(self, quote_id: int, reason: str):
        super().__init__(
            message=f"Quote {quote_id} cannot be converted: {reason}",
            code="DOC203",
            status_code=409,
            details={"quote_id": quote_id},
        )


class DocumentLockedError(DocumentError):
    def __init__(self, document: str, document_id: int, reason: str):
        super().__init__(
            message=f"{document.capitalize()} {document_id} cannot be edited: {reason}",
            code="DOC204",
            status_code=409,
            details={"document": document, "id": document_id},
        )


# ============================================================================
# EXCHANGE RATE ERRORS (FX300-399)
# ============================================================================

class ExchangeRateUnavailableError(LedgerDeskException):
    """Reference rates could not be obtained from the upstream source."""

    def __init__(self, base: str, target: str, reason: str | None = None):
        message = f"Exchange rate {base}/{target} is currently unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            code="FX301",
            status_code=502,
            details={"base": base, "target": target},
        )


# ============================================================================
# SETTINGS ERRORS (SET400-499)
# ============================================================================

class BaseCurrencyNotConfiguredError(LedgerDeskException):
    def __init__(self):
        super().__init__(
            message="System base currency is not set. Please configure it in Settings.",
            code="SET400",
            status_code=409,
        )


class IssuingEntityNotFoundError(LedgerDeskException):
    def __init__(self, entity_id: int):
        super().__init__(
            message=f"Issuing entity {entity_id} not found",
            code="SET401",
            status_code=404,
            details={"issuing_entity_id": entity_id},
        )


class PaymentSourceNotFoundError(LedgerDeskException):
    def __init__(self, payment_source_id: int):
        super().__init__(
            message=f"Payment source {payment_source_id} not found",
            code="SET402",
            status_code=404,
            details={"payment_source_id": payment_source_id},
        )


class RecordInUseError(LedgerDeskException):
    """Deleting the record would orphan invoices, quotes or payment sources."""

    def __init__(self, kind: str, record_id: int, reason: str):
        super().__init__(
            message=f"Cannot delete {kind} {record_id}: {reason}",
            code="SET403",
            status_code=409,
            details={"kind": kind, "id": record_id},
        )


class PaymentSourceMismatchError(LedgerDeskException):
    def __init__(self, payment_source_id: int, issuing_entity_id: int):
        super().__init__(
            message=f"Payment source {payment_source_id} does not belong to issuing entity {issuing_entity_id}",
            code="SET404",
            status_code=400,
            details={"payment_source_id": payment_source_id, "issuing_entity_id": issuing_entity_id},
        )
