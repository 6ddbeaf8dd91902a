"""Human-friendly unique codes: product SKUs, customer IDs and document numbers.

Codes are drawn with ``secrets`` from an alphabet that leaves out the
look-alike symbols ``O``, ``I``, ``0`` and ``1``. Uniqueness is checked
against the owning table with a bounded number of attempts.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledgerdesk.core.config import settings
from ledgerdesk.core.exceptions import CodeGenerationError
from ledgerdesk.models import models

logger = logging.getLogger(__name__)

CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
SKU_PREFIX = "PR-"
CODE_LENGTH = 5
MAX_RETRIES = 10

_ID_DIGITS = "23456789"
_ID_LETTERS = "ABCDEFGHJKMNPQRSTUVWXYZ"


@dataclass(frozen=True)
class SkuGenerated:
    sku: str


@dataclass(frozen=True)
class SkuGenerationFailed:
    reason: str


SkuResult = Union[SkuGenerated, SkuGenerationFailed]


@dataclass(frozen=True)
class CodeGenerated:
    code: str


@dataclass(frozen=True)
class CodeGenerationFailed:
    reason: str


CodeResult = Union[CodeGenerated, CodeGenerationFailed]


def generate_code(length: int = CODE_LENGTH, prefix: str = "") -> str:
    return prefix + "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def generate_customer_code() -> str:
    """Three digits and two letters in random order, e.g. ``7K3P9``."""
    chars = [secrets.choice(_ID_DIGITS) for _ in range(3)]
    chars += [secrets.choice(_ID_LETTERS) for _ in range(2)]
    # Fisher-Yates with a CSPRNG
    for i in range(len(chars) - 1, 0, -1):
        j = secrets.randbelow(i + 1)
        chars[i], chars[j] = chars[j], chars[i]
    return "".join(chars)


def generate_unique_code(
    exists: Callable[[str], bool],
    make_code: Callable[[], str],
    max_retries: int = MAX_RETRIES,
) -> CodeResult:
    """Draw codes until one is not taken, at most *max_retries* times.

    A database error while checking a candidate ends the search at once; a
    later attempt would hit the same broken connection.
    """
    for attempt in range(1, max_retries + 1):
        candidate = make_code()
        try:
            taken = exists(candidate)
        except SQLAlchemyError as exc:
            logger.error("Uniqueness check failed for code %s: %s", candidate, exc)
            return CodeGenerationFailed(reason=f"Database error while checking uniqueness: {exc}")
        if not taken:
            return CodeGenerated(code=candidate)
        logger.debug("Code collision on attempt %d: %s", attempt, candidate)

    logger.error("Could not generate a unique code after %d attempts", max_retries)
    return CodeGenerationFailed(reason=f"Could not generate a unique code after {max_retries} attempts")


def _column_has(db: Session, column, value: str) -> bool:
    return db.query(column).filter(column == value).first() is not None


def generate_unique_sku(db: Session, max_retries: int | None = None) -> SkuResult:
    """Return a fresh ``PR-XXXXX`` SKU not present in ``products``."""
    if max_retries is None:
        max_retries = settings.SKU_MAX_RETRIES

    result = generate_unique_code(
        exists=lambda code: _column_has(db, models.Product.sku, code),
        make_code=lambda: generate_code(CODE_LENGTH, SKU_PREFIX),
        max_retries=max_retries,
    )
    if isinstance(result, CodeGenerated):
        return SkuGenerated(sku=result.code)
    return SkuGenerationFailed(reason=result.reason)


def _require(result: CodeResult, kind: str) -> str:
    if isinstance(result, CodeGenerationFailed):
        raise CodeGenerationError(kind, result.reason)
    return result.code


def new_public_customer_id(db: Session) -> str:
    result = generate_unique_code(
        exists=lambda code: _column_has(db, models.Customer.public_customer_id, code),
        make_code=generate_customer_code,
    )
    return _require(result, "customer ID")


def new_invoice_number(db: Session) -> str:
    result = generate_unique_code(
        exists=lambda code: _column_has(db, models.Invoice.invoice_number, code),
        make_code=generate_code,
    )
    return _require(result, "invoice number")


def new_quote_number(db: Session) -> str:
    result = generate_unique_code(
        exists=lambda code: _column_has(db, models.Quote.quote_number, code),
        make_code=generate_code,
    )
    return _require(result, "quote number")
