"""
POS Store - Write Errors
========================
Raised inside a settlement transaction to abort it. Whatever was
written before the raise is rolled back with it.
"""


class StoreWriteError(Exception):
    """Base error for rejected store writes."""
    pass


class ProductNotFound(StoreWriteError):

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found; stock not adjusted.")


class CustomerBalanceConflict(StoreWriteError):
    """The customer's balance no longer covers the reward being redeemed."""

    def __init__(self, customer_id, required_balance: int):
        self.customer_id = customer_id
        self.required_balance = required_balance
        super().__init__(
            f"Loyalty customer {customer_id} no longer has the "
            f"{required_balance} points required, or does not exist."
        )
