# pos_api/routers/products.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from pos_api.database import get_db, commit_or_raise
from pos_api.core.auth import get_current_user, get_operator_user, get_admin_user
from pos_api.stores import catalog
from pos_api.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)

router = APIRouter(
    prefix="/products",
    tags=["Products"],
)


def _get_product_or_404(db: Session, product_id: int):
    product = catalog.get_product(db, product_id)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )
    return product


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_operator_user),
):
    product = catalog.create_product(db, product_data)
    commit_or_raise(db, "create product")
    db.refresh(product)

    return product


@router.get("", response_model=list[ProductResponse])
def list_products(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return catalog.list_products(db)


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return _get_product_or_404(db, product_id)


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_operator_user),
):
    product = _get_product_or_404(db, product_id)

    catalog.update_product(db, product, product_data)
    commit_or_raise(db, "update product")
    db.refresh(product)

    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_admin_user),
):
    product = _get_product_or_404(db, product_id)

    catalog.delete_product(db, product)
    commit_or_raise(db, "delete product")

    return None
