from typing import Protocol, Awaitable, Any, Dict

# Keep this module dependency-free to avoid circular imports.

class ChainClient(Protocol):
    """Minimal protocol for the chain client used by contracts/tools.

    Matches the one method our code calls, regardless of the concrete
    implementation (LcdClient, a CosmWasm client wrapper, or a mock in tests).
    """

    def query_smart(self, contract_address: str, query_msg: Dict[str, Any]) -> Awaitable[Any]:
        ...

__all__ = ["ChainClient"]
