"""
Read-only bindings for the spend-limit authenticator contract.

Two queries are exposed:

- spending: spending state tracked for one authenticator of an account.
- spendings_by_account: every tracked spending of an account.

Both build the tagged query message and forward it to the injected chain
client. Responses and errors come back exactly as the client produces them.
"""

from typing import Any, Dict, List, Protocol, Tuple, TypedDict, cast

from chain_types import ChainClient


# Shapes returned by the contract's smart queries
class Spending(TypedDict):
    # Uint128, serialized as a decimal string
    value_spent_in_period: str
    # Block time of the last spend, nanoseconds since epoch as a string
    last_spent_at: str

class SpendingResponse(TypedDict):
    spending: Spending

class SpendingsByAccountResponse(TypedDict):
    # [authenticator_id, spending] pairs
    spendings: List[Tuple[str, Spending]]


class SpendLimitReadOnlyInterface(Protocol):
    contract_address: str

    async def spending(self, account: str, authenticator_id: str) -> SpendingResponse:
        ...

    async def spendings_by_account(self, account: str) -> SpendingsByAccountResponse:
        ...


class SpendLimitQueryClient:
    """Query client bound to one spend-limit contract address."""

    def __init__(self, client: ChainClient, contract_address: str) -> None:
        self.client = client
        self.contract_address = contract_address

    async def spending(self, account: str, authenticator_id: str) -> SpendingResponse:
        """
        Return the spending tracked for `authenticator_id` of `account`.

        `authenticator_id` is a Uint64 carried as a string and is forwarded
        as given; the contract rejects malformed values.
        """
        query_msg: Dict[str, Any] = {
            "spending": {
                "account": account,
                "authenticator_id": authenticator_id,
            },
        }
        return cast(SpendingResponse, await self.client.query_smart(self.contract_address, query_msg))

    async def spendings_by_account(self, account: str) -> SpendingsByAccountResponse:
        """Return all spendings tracked for `account`."""
        query_msg: Dict[str, Any] = {
            "spendings_by_account": {
                "account": account,
            },
        }
        return cast(
            SpendingsByAccountResponse,
            await self.client.query_smart(self.contract_address, query_msg),
        )
