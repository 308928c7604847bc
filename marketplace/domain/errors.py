"""
Error taxonomy of the checkout workflow. Every error carries a message that
is safe to show to the buyer as-is.
"""
from typing import List, Optional

# Backend error codes mapped to buyer-facing text
BACKEND_ERROR_MESSAGES = {
    "23505": "This item already exists in your cart.",
    "42501": "You do not have permission to perform this action.",
    "42P01": "Database error. Please try again later.",
}


def describe_backend_error(error, context: str) -> str:
    code = getattr(error, "code", None)
    return BACKEND_ERROR_MESSAGES.get(code, f"Failed to {context}. Please try again.")


class MarketplaceError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class OrderValidationError(MarketplaceError):
    """Checkout form rejected locally; nothing was sent to the backend."""

    def __init__(self, messages: List[str]):
        super().__init__("\n".join(messages))
        self.messages = list(messages)


class AuthenticationError(MarketplaceError):
    def __init__(self, message: str = "You must be signed in to place an order."):
        super().__init__(message)


class OrderCreateError(MarketplaceError):
    """
    At least one supplier order could not be created. ``created_orders`` holds
    the orders that did go through; they are not rolled back.
    """

    def __init__(self, failures: dict, created_orders: Optional[list] = None):
        self.failures = failures
        self.created_orders = list(created_orders or [])
        details = "; ".join(f"{supplier}: {reason}" for supplier, reason in failures.items())
        super().__init__(f"Failed to create one or more orders ({details})")


class CartClearError(MarketplaceError):
    """Orders were placed but the cart could not be emptied afterwards."""

    def __init__(self, created_orders: list, reason: str):
        self.created_orders = list(created_orders)
        self.reason = reason
        super().__init__(
            f"Your {len(self.created_orders)} order(s) were placed, but we could not clear your cart: {reason}"
        )


class CartOperationError(MarketplaceError):
    pass


class NotFoundError(MarketplaceError):
    pass
