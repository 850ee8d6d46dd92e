# =========================================================
# DOMAIN ERRORS
#
# Raised by the stores and the sale processor, mapped to HTTP
# responses by the handler registered in main.py.
# =========================================================


class PosError(Exception):
    status_code = 500
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def context(self) -> dict:
        return {}


class ValidationError(PosError):
    status_code = 422
    kind = "validation_error"


class NotFoundError(PosError):
    status_code = 404
    kind = "not_found"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id

    def context(self) -> dict:
        return {"entity": self.entity, "id": self.entity_id}


class InsufficientStockError(PosError):
    status_code = 400
    kind = "insufficient_stock"

    def __init__(self, product_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for {product_name}. Available stock: {available}"
        )
        self.product_name = product_name
        self.available = available
        self.requested = requested

    def context(self) -> dict:
        return {
            "product": self.product_name,
            "available": self.available,
            "requested": self.requested,
        }


class ConflictError(PosError):
    status_code = 409
    kind = "conflict"


class StorageError(PosError):
    status_code = 500
    kind = "storage_error"
