# =========================================================
# REPORTS ROUTER
#
# Read-only aggregation over committed sales:
# - daily totals
# - totals for a date range (whole end day included)
# - top 10 products by quantity sold
# - top 10 customers by number of purchases
#
# Schema-safe: money is always returned as Decimal (never None)
# =========================================================

from fastapi import APIRouter, Depends, Query, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import func
from datetime import date, datetime
from decimal import Decimal

from pos_api.database import get_db
from pos_api.core.auth import get_operator_user
from pos_api.models.sales import Sale
from pos_api.models.sale_items import SaleItem
from pos_api.models.products import Product
from pos_api.models.customers import Customer
from pos_api.schemas.report import (
    DailySalesResponse,
    SalesByDateResponse,
    TopProductResponse,
    TopCustomerResponse,
)

router = APIRouter(prefix="/reports", tags=["Reports"])

TOP_LIMIT = 10


def _as_money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(Decimal("0.01"))


def _as_date(value) -> date:
    # SQLite hands back date() results as text
    if isinstance(value, str):
        return date.fromisoformat(value)
    return value


# =========================================================
# DAILY SALES
# =========================================================
def _daily_sales(db: Session):
    day = func.date(Sale.sold_at)

    rows = (
        db.query(
            day.label("day"),
            func.coalesce(func.sum(Sale.total), 0).label("total_sales"),
            func.count(Sale.id).label("sales_count"),
        )
        .group_by(day)
        .order_by(day.desc())
        .all()
    )

    return [
        DailySalesResponse(
            day=_as_date(row.day),
            total_sales=_as_money(row.total_sales),
            sales_count=row.sales_count,
        )
        for row in rows
    ]


@router.get("/daily-sales", response_model=list[DailySalesResponse])
def daily_sales(
    db: Session = Depends(get_db),
    current_user=Depends(get_operator_user),
):
    return _daily_sales(db)


# =========================================================
# SALES BY DATE RANGE
# =========================================================
def _sales_by_date(db: Session, start_date: date, end_date: date):
    start_dt = datetime.combine(start_date, datetime.min.time())
    end_dt = datetime.combine(end_date, datetime.max.time())

    total_sales, sales_count = (
        db.query(
            func.coalesce(func.sum(Sale.total), 0),
            func.count(Sale.id),
        )
        .filter(Sale.sold_at.between(start_dt, end_dt))
        .one()
    )

    return SalesByDateResponse(
        start_date=start_date,
        end_date=end_date,
        total_sales=_as_money(total_sales),
        sales_count=sales_count,
    )


@router.get("/sales-by-date", response_model=SalesByDateResponse)
def sales_by_date(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db),
    current_user=Depends(get_operator_user),
):
    if end_date < start_date:
        raise HTTPException(
            status_code=422,
            detail="end_date cannot be before start_date",
        )

    return _sales_by_date(db, start_date, end_date)


# =========================================================
# TOP PRODUCTS
# =========================================================
@router.get("/top-products", response_model=list[TopProductResponse])
def top_products(
    db: Session = Depends(get_db),
    current_user=Depends(get_operator_user),
):
    quantity_sold = func.sum(SaleItem.quantity)

    rows = (
        db.query(
            Product.id.label("product_id"),
            Product.name,
            Product.description,
            quantity_sold.label("total_quantity_sold"),
        )
        .join(SaleItem, SaleItem.product_id == Product.id)
        .group_by(Product.id, Product.name, Product.description)
        .order_by(quantity_sold.desc(), Product.id)
        .limit(TOP_LIMIT)
        .all()
    )

    return [
        TopProductResponse(
            product_id=row.product_id,
            name=row.name,
            description=row.description,
            total_quantity_sold=row.total_quantity_sold,
        )
        for row in rows
    ]


# =========================================================
# TOP CUSTOMERS
# =========================================================
@router.get("/top-customers", response_model=list[TopCustomerResponse])
def top_customers(
    db: Session = Depends(get_db),
    current_user=Depends(get_operator_user),
):
    purchases = func.count(Sale.id)

    rows = (
        db.query(
            Customer.id.label("customer_id"),
            Customer.name,
            Customer.surname,
            Customer.phone,
            purchases.label("total_purchases"),
        )
        .join(Sale, Sale.customer_id == Customer.id)
        .group_by(Customer.id, Customer.name, Customer.surname, Customer.phone)
        .order_by(purchases.desc(), Customer.id)
        .limit(TOP_LIMIT)
        .all()
    )

    return [
        TopCustomerResponse(
            customer_id=row.customer_id,
            name=row.name,
            surname=row.surname,
            phone=row.phone,
            total_purchases=row.total_purchases,
        )
        for row in rows
    ]
