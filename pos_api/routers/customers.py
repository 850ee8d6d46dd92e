# pos_api/routers/customers.py

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from pos_api.database import get_db, commit_or_raise
from pos_api.core.auth import get_current_user, get_operator_user, get_admin_user
from pos_api.stores import customers
from pos_api.schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
)

router = APIRouter(
    prefix="/customers",
    tags=["Customers"],
)


def _get_customer_or_404(db: Session, customer_id: int):
    customer = customers.get_customer(db, customer_id)

    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found",
        )
    return customer


@router.get("", response_model=list[CustomerResponse])
def list_customers(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return customers.list_customers(db)


# Declared before /{customer_id} so "search" is not read as an id
@router.get("/search", response_model=list[CustomerResponse])
def search_customers(
    query: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return customers.search_customers(db, query.strip())


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(
    customer_data: CustomerCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_operator_user),
):
    customer = customers.create_customer(db, customer_data)
    commit_or_raise(db, "create customer")
    db.refresh(customer)

    return customer


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return _get_customer_or_404(db, customer_id)


@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    customer_data: CustomerUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_operator_user),
):
    customer = _get_customer_or_404(db, customer_id)

    customers.update_customer(db, customer, customer_data)
    commit_or_raise(db, "update customer")
    db.refresh(customer)

    return customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_admin_user),
):
    customer = _get_customer_or_404(db, customer_id)

    customers.delete_customer(db, customer)
    commit_or_raise(db, "delete customer")

    return None
