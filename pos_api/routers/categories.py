# pos_api/routers/categories.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from pos_api.database import get_db, commit_or_raise
from pos_api.core.auth import get_current_user, get_operator_user, get_admin_user
from pos_api.stores import catalog
from pos_api.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
)

router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
)


def _get_category_or_404(db: Session, category_id: int):
    category = catalog.get_category(db, category_id)

    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )
    return category


@router.get("", response_model=list[CategoryResponse])
def list_categories(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return catalog.list_categories(db)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category_data: CategoryCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_operator_user),
):
    category = catalog.create_category(db, category_data.name.strip())
    commit_or_raise(db, "create category")
    db.refresh(category)

    return category


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return _get_category_or_404(db, category_id)


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_operator_user),
):
    category = _get_category_or_404(db, category_id)

    catalog.update_category(db, category, category_data.name.strip())
    commit_or_raise(db, "update category")
    db.refresh(category)

    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_admin_user),
):
    category = _get_category_or_404(db, category_id)

    catalog.delete_category(db, category)
    commit_or_raise(db, "delete category")

    return None
