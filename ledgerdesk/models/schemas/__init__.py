"""Pydantic schemas for API requests and responses.

Sub-modules:
- customer: Customer schemas
- product: Product and additional price schemas
- document: Invoice and quote schemas
- entities: Issuing entity and payment source schemas
- settings: Organisation settings schemas
- fx: Exchange rate schemas
- dashboard: Dashboard and revenue schemas
"""
from .customer import CustomerCreate, CustomerOut, CustomerUpdate
from .dashboard import (
    DashboardKpis,
    ExpiringQuoteOut,
    MoneyKpi,
    MonthlyRevenueOut,
    OverdueInvoiceOut,
    RecentItemOut,
    TopProductOut,
)
from .document import (
    InvoiceCreate,
    InvoiceOut,
    InvoiceStatusUpdate,
    InvoiceUpdate,
    LineItemIn,
    LineItemOut,
    QuoteCreate,
    QuoteOut,
    QuoteStatusUpdate,
    QuoteUpdate,
)
from .entities import (
    IssuingEntityCreate,
    IssuingEntityOut,
    IssuingEntityUpdate,
    PaymentSourceCreate,
    PaymentSourceOut,
    PaymentSourceUpdate,
)
from .fx import FxConversionOut, FxRateOut
from .product import (
    AdditionalPriceIn,
    AdditionalPriceOut,
    ProductCreate,
    ProductOut,
    ProductUpdate,
    SkuOut,
)
from .settings import SettingsOut, SettingsUpdate

__all__ = [
    "CustomerCreate",
    "CustomerOut",
    "CustomerUpdate",
    "DashboardKpis",
    "ExpiringQuoteOut",
    "MoneyKpi",
    "MonthlyRevenueOut",
    "OverdueInvoiceOut",
    "RecentItemOut",
    "TopProductOut",
    "InvoiceCreate",
    "InvoiceOut",
    "InvoiceStatusUpdate",
    "InvoiceUpdate",
    "LineItemIn",
    "LineItemOut",
    "QuoteCreate",
    "QuoteOut",
    "QuoteStatusUpdate",
    "QuoteUpdate",
    "IssuingEntityCreate",
    "IssuingEntityOut",
    "IssuingEntityUpdate",
    "PaymentSourceCreate",
    "PaymentSourceOut",
    "PaymentSourceUpdate",
    "FxConversionOut",
    "FxRateOut",
    "AdditionalPriceIn",
    "AdditionalPriceOut",
    "ProductCreate",
    "ProductOut",
    "ProductUpdate",
    "SkuOut",
    "SettingsOut",
    "SettingsUpdate",
]
