from __future__ import annotations

from fastapi import APIRouter

from ledgerdesk.api.dependencies import DbDep
from ledgerdesk.core.exceptions import CodeGenerationError
from ledgerdesk.models.schemas import SkuOut
from ledgerdesk.utils.id_generator import SkuGenerationFailed, generate_unique_sku

router = APIRouter(tags=["ids"])


@router.get("/product_sku", response_model=SkuOut)
def new_product_sku(db: DbDep):
    """A SKU not used by any product yet. Nothing is reserved."""
    result = generate_unique_sku(db)
    if isinstance(result, SkuGenerationFailed):
        raise CodeGenerationError("SKU", result.reason)
    return SkuOut(sku=result.sku)
