"""Capability schema and the indexed token table built from it.

Wire payloads use camelCase keys; the models accept both spellings and
dump back to camelCase for the cache file.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DEFAULT_DECIMALS = 18


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )


class TokenUid(_WireModel):
    chain_id: str | None = None
    address: str | None = None


class CapabilityToken(_WireModel):
    symbol: str | None = None
    name: str | None = None
    token_uid: TokenUid | None = None
    decimals: int | None = None


class SwapCapability(_WireModel):
    capability_id: str | None = None
    supported_tokens: list[CapabilityToken] | None = None


class CapabilityEntry(_WireModel):
    swap_capability: SwapCapability | None = None


class GetCapabilitiesResponse(_WireModel):
    """Top-level response of the ``getCapabilities`` remote tool."""

    capabilities: list[CapabilityEntry] | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class TokenEntry:
    """One chain deployment of a token."""

    chain_id: str
    address: str
    decimals: int = DEFAULT_DECIMALS


@dataclass
class CapabilityTable:
    """Symbol → chain entries, plus symbols in first-seen order.

    Built once per session; replaced wholesale on refresh.
    """

    tokens: dict[str, list[TokenEntry]] = field(default_factory=dict)
    available_symbols: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.available_symbols)

    def lookup(self, symbol: str) -> list[TokenEntry]:
        """Return chain entries for a symbol (exact match first, then case-insensitive)."""
        if symbol in self.tokens:
            return list(self.tokens[symbol])
        lowered = symbol.lower()
        for known in self.available_symbols:
            if known.lower() == lowered:
                return list(self.tokens[known])
        return []

    def canonical_symbol(self, symbol: str) -> str | None:
        lowered = symbol.lower()
        for known in self.available_symbols:
            if known.lower() == lowered:
                return known
        return None

    @classmethod
    def from_response(cls, response: GetCapabilitiesResponse) -> "CapabilityTable":
        """Index every supported token of every swap capability.

        Tokens missing a symbol, chain id or address are skipped. Decimals
        default to 18.
        """
        table = cls()
        for entry in response.capabilities or []:
            if entry.swap_capability is None:
                continue
            for token in entry.swap_capability.supported_tokens or []:
                uid = token.token_uid
                if not (token.symbol and uid and uid.chain_id and uid.address):
                    continue

                entries = table.tokens.get(token.symbol)
                if entries is None:
                    entries = []
                    table.tokens[token.symbol] = entries
                    table.available_symbols.append(token.symbol)

                entries.append(
                    TokenEntry(
                        chain_id=uid.chain_id,
                        address=uid.address,
                        decimals=(
                            token.decimals
                            if token.decimals is not None
                            else DEFAULT_DECIMALS
                        ),
                    )
                )
        return table
