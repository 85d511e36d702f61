"""Supported chains and name resolution."""

CHAIN_NAMES: dict[str, str] = {
    "1": "Ethereum",
    "42161": "Arbitrum",
    "10": "Optimism",
    "137": "Polygon",
    "8453": "Base",
}

_ALIASES: dict[str, str] = {
    "ethereum": "1",
    "eth": "1",
    "mainnet": "1",
    "arbitrum": "42161",
    "arbitrum one": "42161",
    "arb": "42161",
    "optimism": "10",
    "op": "10",
    "polygon": "137",
    "matic": "137",
    "base": "8453",
}


def resolve_chain_id(chain: str) -> str | None:
    """Map a chain name or numeric id to a chain id, or None if unsupported."""
    key = chain.strip().lower()
    if key in CHAIN_NAMES:
        return key
    return _ALIASES.get(key)


def chain_name(chain_id: str) -> str:
    return CHAIN_NAMES.get(chain_id, f"chain {chain_id}")
