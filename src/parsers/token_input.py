"""Address validation and multi-token input parsing."""

from collections.abc import Iterable

ADDRESS_LENGTH = 42
MAX_TOKENS = 5


class InvalidAddressError(ValueError):
    pass


def is_valid_address(value: str) -> bool:
    """0x-prefixed, 42 chars. No checksum validation."""
    return len(value) == ADDRESS_LENGTH and value.startswith("0x")


def parse_token_input(
    text: str,
    existing: Iterable[str] = (),
    *,
    max_tokens: int = MAX_TOKENS,
) -> list[str]:
    """Merge newline-separated addresses into an existing selection.

    Invalid lines are dropped silently, duplicates keep their first position
    and anything beyond ``max_tokens`` is truncated.
    """
    candidates = [line.strip() for line in text.splitlines()]
    merged = list(dict.fromkeys([*existing, *(c for c in candidates if is_valid_address(c))]))
    return merged[:max_tokens]


def validate_token_addresses(addresses: Iterable[str], *, max_tokens: int = MAX_TOKENS) -> list[str]:
    """Check an analysis request before anything hits the network."""
    result = list(addresses)
    if not result:
        raise InvalidAddressError("At least one token address is required")
    if len(result) > max_tokens:
        raise InvalidAddressError(f"At most {max_tokens} tokens can be analyzed at once")
    invalid = [a for a in result if not is_valid_address(a)]
    if invalid:
        raise InvalidAddressError(f"Invalid token address: {invalid[0]!r}")
    if len({a.lower() for a in result}) != len(result):
        raise InvalidAddressError("Token addresses must be distinct")
    return result
