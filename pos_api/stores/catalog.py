# =========================================================
# CATALOG STORE
#
# Products and categories. Every function works inside the
# caller's Session; nothing here commits.
# =========================================================

from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload

from pos_api.core.errors import ConflictError, InsufficientStockError, NotFoundError
from pos_api.models.categories import Category
from pos_api.models.products import Product
from pos_api.models.sale_items import SaleItem


# =========================================================
# PRODUCTS
# =========================================================
def get_product(db: Session, product_id: int, for_update: bool = False):
    query = db.query(Product).filter(Product.id == product_id)

    # Row lock on backends that support it (ignored by SQLite,
    # which serializes writers with BEGIN IMMEDIATE instead)
    if for_update:
        query = query.with_for_update().populate_existing()

    return query.first()


def decrement_stock(db: Session, product: Product, quantity: int):
    """
    Take `quantity` units off the product inside the current unit of work.

    The UPDATE only matches while enough stock remains, so the check and
    the write are a single statement even if the row was not locked.
    """
    result = db.execute(
        update(Product)
        .where(Product.id == product.id, Product.stock >= quantity)
        .values(stock=Product.stock - quantity)
        .execution_options(synchronize_session=False)
    )

    if result.rowcount == 0:
        db.refresh(product)
        raise InsufficientStockError(product.name, product.stock, quantity)

    # Keep the loaded instance in step with the row
    db.refresh(product, attribute_names=["stock"])


def list_products(db: Session):
    return (
        db.query(Product)
        .options(joinedload(Product.category))
        .order_by(Product.id)
        .all()
    )


def _ensure_product_name_free(db: Session, name: str, exclude_id: int | None = None):
    query = db.query(Product).filter(Product.name == name)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)

    if query.first():
        raise ConflictError("A product with this name already exists")


def create_product(db: Session, product_data) -> Product:
    _ensure_product_name_free(db, product_data.name)

    if not get_category(db, product_data.category_id):
        raise NotFoundError("Category", product_data.category_id)

    product = Product(
        name=product_data.name,
        description=product_data.description,
        sale_price=product_data.sale_price,
        cost=product_data.cost,
        stock=product_data.stock,
        category_id=product_data.category_id,
    )
    db.add(product)
    db.flush()

    return product


def update_product(db: Session, product: Product, product_data) -> Product:
    changes = product_data.model_dump(exclude_unset=True)

    if changes.get("name") is not None:
        _ensure_product_name_free(db, changes["name"], exclude_id=product.id)

    if changes.get("category_id") is not None and not get_category(db, changes["category_id"]):
        raise NotFoundError("Category", changes["category_id"])

    # Direct overwrite, stock included; only description and cost can be cleared
    for field, value in changes.items():
        if field not in ("description", "cost") and value is None:
            continue
        setattr(product, field, value)

    db.flush()
    return product


def delete_product(db: Session, product: Product):
    has_sales = (
        db.query(SaleItem.id)
        .filter(SaleItem.product_id == product.id)
        .first()
    )
    if has_sales:
        raise ConflictError("Product has recorded sales and cannot be deleted")

    db.delete(product)
    db.flush()


# =========================================================
# CATEGORIES
# =========================================================
def get_category(db: Session, category_id: int):
    return db.query(Category).filter(Category.id == category_id).first()


def list_categories(db: Session):
    return db.query(Category).order_by(Category.name).all()


def _ensure_category_name_free(db: Session, name: str, exclude_id: int | None = None):
    query = db.query(Category).filter(Category.name == name)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)

    if query.first():
        raise ConflictError("A category with this name already exists")


def create_category(db: Session, name: str) -> Category:
    _ensure_category_name_free(db, name)

    category = Category(name=name)
    db.add(category)
    db.flush()

    return category


def update_category(db: Session, category: Category, name: str) -> Category:
    _ensure_category_name_free(db, name, exclude_id=category.id)

    category.name = name
    db.flush()

    return category


def delete_category(db: Session, category: Category):
    in_use = db.query(Product.id).filter(Product.category_id == category.id).first()
    if in_use:
        raise ConflictError("Category is referenced by products and cannot be deleted")

    db.delete(category)
    db.flush()
