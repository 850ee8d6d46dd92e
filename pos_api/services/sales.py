# =========================================================
# SALE TRANSACTION PROCESSOR
#
# One sale = one unit of work (the Session):
# - header, line items, stock decrements and the customer
#   timestamp are committed together or not at all
# - totals are always recomputed here, never taken from the caller
# - storage conflicts rerun the whole sale, never part of it
# =========================================================

import logging
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from pos_api.core.config import settings
from pos_api.core.errors import (
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    PosError,
    StorageError,
    ValidationError,
)
from pos_api.models.sale_items import SaleItem
from pos_api.models.sales import PAYMENT_METHODS, STATUS_COMPLETED, Sale
from pos_api.stores import catalog, customers

logger = logging.getLogger("pos_api")

CENT = Decimal("0.01")
# Largest amount a Numeric(10,2) column holds
MAX_AMOUNT = Decimal("100000000")

# SQLSTATEs a PostgreSQL backend uses for serialization failure and deadlock
RETRYABLE_PGCODES = {"40001", "40P01"}
UNIQUE_VIOLATION_PGCODE = "23505"


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def _invalid_amount(value) -> bool:
    amount = Decimal(str(value))
    return not amount.is_finite() or amount < 0


# =========================================================
# INPUT VALIDATION (before any store interaction)
# =========================================================
def validate_sale_request(sale_data):
    if sale_data.payment_method not in PAYMENT_METHODS:
        raise ValidationError(
            f"Invalid payment method '{sale_data.payment_method}'. "
            f"Allowed: {', '.join(PAYMENT_METHODS)}"
        )

    if not sale_data.items:
        raise ValidationError("Sale must contain items")

    for position, item in enumerate(sale_data.items, start=1):
        if item.product_id is None or item.product_id < 1:
            raise ValidationError(f"Item {position}: product_id must be a positive integer")

        if item.quantity is None or item.quantity < 1:
            raise ValidationError(f"Item {position}: quantity must be greater than zero")

        if item.unit_price is not None:
            if _invalid_amount(item.unit_price):
                raise ValidationError(f"Item {position}: unit_price cannot be negative")

            # 0 means "catalog price", anything else must be at least a cent
            if 0 < item.unit_price < CENT:
                raise ValidationError(f"Item {position}: unit_price must be at least {CENT}")

            if item.unit_price >= MAX_AMOUNT:
                raise ValidationError(f"Item {position}: unit_price is too large")

    if sale_data.total is not None and _invalid_amount(sale_data.total):
        raise ValidationError("total cannot be negative")

    if sale_data.total is not None and sale_data.total >= MAX_AMOUNT:
        raise ValidationError("total is too large")

    if sale_data.customer_id is not None and sale_data.customer_id < 1:
        raise ValidationError("customer_id must be a positive integer")


def effective_unit_price(requested_price, catalog_price) -> Decimal:
    # A supplied price of 0 counts as "not supplied"
    if requested_price:
        return _money(requested_price)
    return _money(catalog_price)


# =========================================================
# STORAGE ERROR CLASSIFICATION
# =========================================================
def _pgcode(exc: SQLAlchemyError):
    return getattr(getattr(exc, "orig", None), "pgcode", None)


def is_retryable_conflict(exc: SQLAlchemyError) -> bool:
    if _pgcode(exc) in RETRYABLE_PGCODES:
        return True

    if isinstance(exc, OperationalError):
        message = str(exc.orig).lower()
        return "database is locked" in message or "deadlock" in message

    return False


def classify_storage_error(exc: SQLAlchemyError) -> PosError:
    if is_retryable_conflict(exc):
        return ConflictError("The sale conflicted with a concurrent update, retry it")

    if isinstance(exc, IntegrityError) and (
        _pgcode(exc) == UNIQUE_VIOLATION_PGCODE
        or "unique constraint" in str(exc.orig).lower()
    ):
        return ConflictError("The sale conflicted with an existing record")

    return StorageError("Unable to complete sale")


# =========================================================
# UNIT OF WORK BODY
# =========================================================
def _record_sale(db: Session, operator_id: int, sale_data) -> Sale:
    customer = None
    if sale_data.customer_id:
        customer = customers.get_customer(db, sale_data.customer_id)
        if customer is None:
            # Lenient on purpose: the sale goes through unattached
            logger.warning(
                f"Sale by user {operator_id}: customer {sale_data.customer_id} "
                f"not found, recording sale without customer"
            )

    sale = Sale(
        user_id=operator_id,
        customer_id=customer.id if customer else None,
        payment_method=sale_data.payment_method,
        status=STATUS_COMPLETED,
        total=_money(sale_data.total) if sale_data.total else Decimal("0.00"),
    )
    db.add(sale)
    db.flush()

    running_total = Decimal("0.00")
    staged_items = []

    for item in sale_data.items:
        product = catalog.get_product(db, item.product_id, for_update=True)

        if product is None:
            raise NotFoundError("Product", item.product_id)

        if product.stock < item.quantity:
            raise InsufficientStockError(product.name, product.stock, item.quantity)

        unit_price = effective_unit_price(item.unit_price, product.sale_price)
        subtotal = _money(unit_price * item.quantity)
        if running_total + subtotal >= MAX_AMOUNT:
            raise ValidationError(f"Sale total for product {product.id} exceeds the allowed amount")

        running_total += subtotal

        staged_items.append(
            SaleItem(
                sale_id=sale.id,
                product_id=product.id,
                quantity=item.quantity,
                unit_price=unit_price,
                subtotal=subtotal,
            )
        )

        catalog.decrement_stock(db, product, item.quantity)

    db.add_all(staged_items)
    sale.total = running_total
    db.flush()

    if customer is not None:
        customers.touch_last_purchase(db, customer, datetime.now(timezone.utc))

    return sale


# =========================================================
# PUBLIC ENTRY POINT
# =========================================================
def process_sale(
    db: Session,
    operator_id: int,
    sale_data,
    max_attempts: int | None = None,
) -> Sale:
    """
    Record a sale and return it as committed.

    Raises ValidationError, NotFoundError, InsufficientStockError,
    ConflictError or StorageError. Whatever is raised, the session has
    been rolled back and nothing from this sale is persisted.
    """
    validate_sale_request(sale_data)

    attempts = max(1, max_attempts or settings.SALE_MAX_ATTEMPTS)
    advisory_total = sale_data.total

    for attempt in range(1, attempts + 1):
        try:
            sale = _record_sale(db, operator_id, sale_data)
            sale_id = sale.id
            db.commit()
            break

        except PosError as exc:
            db.rollback()
            logger.warning(f"Sale by user {operator_id} rejected: {exc.message}")
            raise

        except SQLAlchemyError as exc:
            db.rollback()

            if is_retryable_conflict(exc) and attempt < attempts:
                logger.warning(
                    f"Sale by user {operator_id} hit a storage conflict "
                    f"(attempt {attempt}/{attempts}), retrying"
                )
                continue

            error = classify_storage_error(exc)
            if isinstance(error, StorageError):
                logger.exception(f"Sale by user {operator_id} failed in storage")
            else:
                logger.warning(f"Sale by user {operator_id} aborted: {error.message}")
            raise error from exc

        except Exception:
            db.rollback()
            raise

    sale = get_sale(db, sale_id)

    if advisory_total is not None and _money(advisory_total) != sale.total:
        logger.info(
            f"Sale {sale.id}: caller total {advisory_total} replaced by computed {sale.total}"
        )

    logger.info(
        f"Sale {sale.id} committed: total={sale.total} items={len(sale.items)} "
        f"user={operator_id} customer={sale.customer_id}"
    )

    return sale


# =========================================================
# READ SIDE
# =========================================================
def _composed_sale_query(db: Session):
    return db.query(Sale).options(
        joinedload(Sale.items).joinedload(SaleItem.product),
        joinedload(Sale.customer),
        joinedload(Sale.operator),
    )


def get_sale(db: Session, sale_id: int):
    return (
        _composed_sale_query(db)
        .filter(Sale.id == sale_id)
        .first()
    )


def list_sales(db: Session, limit: int = 50, offset: int = 0):
    return (
        db.query(Sale)
        .options(joinedload(Sale.customer), joinedload(Sale.operator))
        .order_by(Sale.sold_at.desc(), Sale.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )
