"""Runtime constants used by the agent tools and the chain client."""

# 1 second = 1_000_000_000 nanoseconds (CosmWasm block time resolution)
NANOSECONDS_PER_SECOND: int = 1_000_000_000

# Seconds to wait on an LCD request before giving up.
DEFAULT_HTTP_TIMEOUT: float = 10.0

# Path template of the CosmWasm smart-query endpoint on an LCD gateway.
SMART_QUERY_PATH: str = "/cosmwasm/wasm/v1/contract/{address}/smart/{query}"
