"""Sales: checkout, paginated history, today's takings, single sale."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from voicepos.api.deps import get_current_user, get_db
from voicepos.core.audit import AuditLog
from voicepos.core.dates import parse_filter_datetime
from voicepos.core.exceptions import InvalidInput
from voicepos.models.user import User
from voicepos.schemas.sale import CheckoutRequest, SaleOut, SalePage, TodaySales
from voicepos.services import sale_service

router = APIRouter()


@router.post("", response_model=SaleOut, status_code=status.HTTP_201_CREATED)
def create_sale(
    data: CheckoutRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    sale = sale_service.checkout(
        db,
        current_user.id,
        [(line.product_id, line.quantity) for line in data.items],
        payment_method=data.payment_method,
        amount_paid=data.amount_paid,
        tax_rate=data.tax_rate,
    )
    AuditLog.log_action(
        "create", "sale", sale.id, current_user,
        changes={"invoice": sale.invoice_number, "total": sale.total},
    )
    return sale


@router.get("", response_model=SalePage)
def list_sales(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        start = parse_filter_datetime(start_date)
        end = parse_filter_datetime(end_date, end_of_day=True)
    except ValueError:
        raise InvalidInput("startDate and endDate must be ISO dates (YYYY-MM-DD) or datetimes")
    return sale_service.list_sales(db, current_user.id, start=start, end=end, page=page, limit=limit)


@router.get("/today", response_model=TodaySales)
def todays_sales(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return sale_service.todays_sales(db, current_user.id)


@router.get("/{sale_id}", response_model=SaleOut)
def get_sale(sale_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return sale_service.get_sale(db, current_user.id, sale_id)
