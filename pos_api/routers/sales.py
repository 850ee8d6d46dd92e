# =========================================================
# SALES ROUTER
#
# - Only admins and sellers can record or browse sales
# - The sale itself is recorded by services.sales.process_sale;
#   its domain errors are turned into responses in main.py
# - Sales are immutable once recorded (no update/delete routes)
# =========================================================

from fastapi import APIRouter, Depends, HTTPException, Query, status, Request
from sqlalchemy.orm import Session

from pos_api.database import get_db
from pos_api.core.auth import get_operator_user
from pos_api.services import sales as sale_service
from pos_api.schemas.sale import SaleCreate, SaleResponse, SaleSummaryResponse
from pos_api.core.rate_limiter import limiter

router = APIRouter(prefix="/sales", tags=["Sales"])


# =========================================================
# CREATE SALE
# =========================================================
@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_sale(
    request: Request,
    sale_data: SaleCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_operator_user),
):
    return sale_service.process_sale(db, current_user.id, sale_data)


# =========================================================
# LIST SALES
# =========================================================
@router.get("", response_model=list[SaleSummaryResponse])
def list_sales(
    db: Session = Depends(get_db),
    current_user=Depends(get_operator_user),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    return sale_service.list_sales(db, limit=limit, offset=offset)


# =========================================================
# GET SINGLE SALE
# =========================================================
@router.get("/{sale_id}", response_model=SaleResponse)
def get_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_operator_user),
):
    sale = sale_service.get_sale(db, sale_id)

    if not sale:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Sale not found",
        )

    return sale
