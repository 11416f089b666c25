"""
POS Orders Engine — Errors
============================
Failures that abort an order operation. Decisions that merely refuse
an action (reward rules) are RejectionReason values, not exceptions.
"""


class OrderError(Exception):
    """Base error for all order operations."""
    pass


class EmptyOrderError(OrderError):
    """Submission of a draft with no line items. Nothing was written."""

    def __init__(self, message: str = None):
        super().__init__(message or "Cannot submit an empty order.")


class ConfirmationRequiredError(OrderError):
    """Settlement attempted on a large order that was never confirmed."""

    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(
            f"Order {order_id} exceeds the confirmation threshold and "
            f"must be confirmed before settlement."
        )


class SettlementError(OrderError):
    """
    The atomic settlement write failed or was rejected.

    Nothing from the attempt was committed. The draft that produced the
    plan is unchanged and may be resubmitted.
    """

    def __init__(self, order_id, cause: Exception):
        self.order_id = order_id
        self.cause = cause
        super().__init__(f"Settlement of order {order_id} failed: {cause}")


class OrderNotFoundError(OrderError):

    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found.")


class PaymentAmountTooLowError(OrderError):
    """Tendered amount is below the order total. No payment was recorded."""

    def __init__(self, order_id, amount, total):
        self.order_id = order_id
        self.amount = amount
        self.total = total
        super().__init__(
            f"Payment amount must be at least {total} "
            f"for order {order_id}, got {amount}."
        )


class InvalidStatusTransitionError(OrderError):

    def __init__(self, order_id, current: str, target: str):
        self.order_id = order_id
        self.current = current
        self.target = target
        super().__init__(
            f"Order {order_id} cannot move from '{current}' to '{target}'."
        )
