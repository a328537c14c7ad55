"""Domain errors raised by the storefront core.

They extend Protean's exceptions so handlers raise them exactly like a plain
``ValidationError`` and callers that only know Protean's hierarchy still
catch them. The API layer maps each one to its own response.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class ProductUnavailable(ValidationError):
    """The product does not exist or is not listed for sale."""

    def __init__(self, product_id, reason="Product does not exist or is not listed"):
        self.product_id = str(product_id)
        super().__init__({"product_id": [reason]})


class InsufficientInventory(ValidationError):
    """A requested quantity exceeds what is left in stock."""

    def __init__(self, product_id, available, requested):
        self.product_id = str(product_id)
        self.available = available
        self.requested = requested
        super().__init__(
            {"quantity": [f"Insufficient inventory for product {product_id}: {available} available, {requested} requested"]}
        )


class AmountMismatch(ValidationError):
    """The total declared by the client differs from the recomputed total."""

    def __init__(self, correct_amount, declared_amount):
        self.correct_amount = correct_amount
        self.declared_amount = declared_amount
        super().__init__(
            {"total_amount": [f"Amount is incorrect, correct amount: {correct_amount}"]}
        )


class OrderNotFound(ObjectNotFoundError):
    """Raised for missing orders and for orders owned by someone else alike."""

    def __init__(self, order_id):
        self.order_id = str(order_id)
        super().__init__(f"Order {self.order_id} not found")
