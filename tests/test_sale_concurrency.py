import threading

from pos_api.core.errors import InsufficientStockError
from pos_api.models.products import Product
from pos_api.models.sales import Sale
from pos_api.schemas.sale import SaleCreate, SaleItemCreate
from pos_api.services import sales as sale_service


def _run_concurrently(session_factory, operator_id, product_id, quantities):
    barrier = threading.Barrier(len(quantities))
    outcomes = []
    lock = threading.Lock()

    def attempt(quantity):
        session = session_factory()
        try:
            barrier.wait()
            sale_service.process_sale(
                session,
                operator_id,
                SaleCreate(
                    payment_method="cash",
                    items=[SaleItemCreate(product_id=product_id, quantity=quantity)],
                ),
            )
            result = "ok"
        except InsufficientStockError:
            result = "insufficient"
        finally:
            session.close()

        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt, args=(q,)) for q in quantities]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    return sorted(outcomes)


def test_two_sales_cannot_oversell_the_same_product(db, session_factory, admin, make_product):
    product = make_product(stock=5)
    product_id, admin_id = product.id, admin.id
    # Release the fixture session's transaction before the race
    db.close()

    outcomes = _run_concurrently(session_factory, admin_id, product_id, [3, 3])

    assert outcomes == ["insufficient", "ok"]

    with session_factory() as session:
        assert session.get(Product, product_id).stock == 2
        assert session.query(Sale).count() == 1


def test_concurrent_sales_that_fit_all_succeed(db, session_factory, admin, make_product):
    product = make_product(stock=10)
    product_id, admin_id = product.id, admin.id
    db.close()

    outcomes = _run_concurrently(session_factory, admin_id, product_id, [2, 3, 4])

    assert outcomes == ["ok", "ok", "ok"]

    with session_factory() as session:
        assert session.get(Product, product_id).stock == 1
        assert session.query(Sale).count() == 3
