from .spend_limit import (
    SpendLimitQueryClient,
    SpendLimitReadOnlyInterface,
    Spending,
    SpendingResponse,
    SpendingsByAccountResponse,
)

__all__ = [
    "SpendLimitQueryClient",
    "SpendLimitReadOnlyInterface",
    "Spending",
    "SpendingResponse",
    "SpendingsByAccountResponse",
]
