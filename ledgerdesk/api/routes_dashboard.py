"""Dashboard endpoints: revenue chart, KPIs and work lists."""
from __future__ import annotations

from fastapi import APIRouter, Query

from ledgerdesk.api.dependencies import DbDep
from ledgerdesk.models import schemas
from ledgerdesk.services import dashboard_service
from ledgerdesk.services.revenue_service import get_monthly_revenue

router = APIRouter(tags=["dashboard"])


@router.get("/revenue", response_model=list[schemas.MonthlyRevenueOut])
def monthly_revenue(db: DbDep):
    """Paid revenue for the trailing six months in the base currency."""
    return [
        schemas.MonthlyRevenueOut(month=m.month, month_full=m.month_full, revenue=m.revenue)
        for m in get_monthly_revenue(db)
    ]


@router.get("/kpis", response_model=schemas.DashboardKpis)
def kpis(db: DbDep):
    return dashboard_service.get_dashboard_kpis(db)


@router.get("/overdue-invoices", response_model=list[schemas.OverdueInvoiceOut])
def overdue_invoices(db: DbDep):
    return dashboard_service.get_overdue_invoices(db)


@router.get("/expiring-quotes", response_model=list[schemas.ExpiringQuoteOut])
def expiring_quotes(db: DbDep):
    return dashboard_service.get_expiring_quotes(db)


@router.get("/recently-updated", response_model=list[schemas.RecentItemOut])
def recently_updated(db: DbDep, limit: int = Query(10, ge=1, le=50)):
    return dashboard_service.get_recently_updated(db, limit=limit)
