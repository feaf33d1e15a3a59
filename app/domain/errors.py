# app/domain/errors.py


class ShopError(Exception):
    """Base class for errors raised by the catalog, cart and order services."""


class ValidationError(ShopError):
    """Malformed input: bad quantity, bad status value, illegal transition."""


class InsufficientStockError(ValidationError):
    def __init__(self, product_id: str, requested: int):
        super().__init__(f"Not enough stock for product {product_id} (requested {requested})")
        self.product_id = product_id
        self.requested = requested


class NotFoundError(ShopError):
    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class EmptyCartError(ShopError):
    def __init__(self, user_id: str):
        super().__init__("Cart is empty")
        self.user_id = user_id


class ForbiddenError(ShopError):
    pass


class StorageError(ShopError):
    """Persistence failure. The underlying SQLAlchemy error is chained as __cause__."""

    def __init__(self, operation: str):
        super().__init__(f"Storage failure during {operation}")
        self.operation = operation
