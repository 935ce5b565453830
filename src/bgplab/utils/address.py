"""IPv4 address arithmetic utilities."""

import ipaddress
import re
from typing import NamedTuple

ADDRESS_BITS = 32
MAX_ADDRESS = 0xFFFFFFFF

# Four dot-separated groups of 1-3 ASCII digits, no range check
ADDRESS_PATTERN = re.compile(r"^(\d{1,3}\.){3}\d{1,3}$", re.ASCII)


class ValidAddress(NamedTuple):
    """Successfully parsed IPv4 address."""

    value: int  # 32-bit unsigned


class InvalidAddress(NamedTuple):
    """Rejected address text."""

    reason: str


ParsedAddress = ValidAddress | InvalidAddress


def has_address_format(text: object) -> bool:
    """
    Check whether text looks like a dotted-quad address.

    Only the shape is checked; octet values may still be out of range.

    Args:
        text: Candidate address text

    Returns:
        True if text matches the four-octet numeric pattern
    """
    return isinstance(text, str) and ADDRESS_PATTERN.match(text) is not None


def parse_address(text: object) -> ParsedAddress:
    """
    Parse dotted-decimal text into a 32-bit integer.

    Accepts exactly four decimal octets in the range 0-255. Multi-digit
    octets with a leading zero are rejected so that every accepted string
    formats back to itself.

    Args:
        text: Address text (e.g., "192.0.2.1")

    Returns:
        ValidAddress with the integer value, or InvalidAddress with a reason
    """
    if not isinstance(text, str):
        return InvalidAddress(f"expected text, got {type(text).__name__}")

    parts = text.split(".")
    if len(parts) != 4:
        return InvalidAddress(f"expected 4 octets, got {len(parts)}")

    value = 0
    for index, part in enumerate(parts):
        if not part or not part.isascii() or not part.isdigit():
            return InvalidAddress(f"octet {index + 1} is not a number: {part!r}")
        if len(part) > 1 and part[0] == "0":
            return InvalidAddress(f"octet {index + 1} has a leading zero: {part!r}")
        octet = int(part)
        if octet > 255:
            return InvalidAddress(f"octet {index + 1} out of range: {octet}")
        value = (value << 8) | octet

    return ValidAddress(value)


def address_value(address: int | str) -> int | None:
    """
    Normalize an address given as integer or text.

    Args:
        address: 32-bit integer or dotted-decimal text

    Returns:
        Integer value, or None if the address is invalid
    """
    if isinstance(address, bool):
        return None
    if isinstance(address, int):
        return address if 0 <= address <= MAX_ADDRESS else None
    parsed = parse_address(address)
    if isinstance(parsed, ValidAddress):
        return parsed.value
    return None


def format_address(value: int) -> str:
    """
    Render a 32-bit integer as dotted-decimal text.

    Args:
        value: Address as unsigned 32-bit integer

    Returns:
        Address text (e.g., "10.0.0.1")

    Raises:
        ValueError: If value is outside the 32-bit range
    """
    if not 0 <= value <= MAX_ADDRESS:
        raise ValueError(f"Address value out of 32-bit range: {value}")
    return str(ipaddress.IPv4Address(value))


def _bits_to_octets(bits: str) -> str:
    return ".".join(bits[i : i + 8] for i in range(0, ADDRESS_BITS, 8))


def to_binary(address: int | str) -> str:
    """
    Render an address as four 8-bit groups.

    Args:
        address: 32-bit integer or dotted-decimal text

    Returns:
        Bit string such as "11000000.10101000.00000001.01100100",
        or "Invalid IP" if the address cannot be parsed
    """
    value = address_value(address)
    if value is None:
        return "Invalid IP"
    return _bits_to_octets(format(value, "032b"))


def mask_for_prefix(prefix: int) -> int:
    """
    Build the network mask for a prefix length.

    Args:
        prefix: Prefix length (0-32)

    Returns:
        Mask as unsigned 32-bit integer

    Raises:
        ValueError: If prefix is outside 0-32
    """
    if isinstance(prefix, bool) or not isinstance(prefix, int):
        raise ValueError(f"Prefix must be an integer, got {prefix!r}")
    if not 0 <= prefix <= ADDRESS_BITS:
        raise ValueError(f"Prefix out of range: {prefix} (valid: 0-32)")

    # Shifting by the full width is guarded explicitly
    if prefix == 0:
        return 0
    if prefix == ADDRESS_BITS:
        return MAX_ADDRESS
    return (MAX_ADDRESS << (ADDRESS_BITS - prefix)) & MAX_ADDRESS


def wildcard_for_prefix(prefix: int) -> int:
    """Return the host-bit (inverse) mask for a prefix length."""
    return ~mask_for_prefix(prefix) & MAX_ADDRESS


def prefix_to_binary_mask(prefix: int) -> str:
    """
    Render the mask for a prefix as four 8-bit groups.

    Args:
        prefix: Prefix length (0-32)

    Returns:
        Bit string such as "11111111.11111111.11111111.00000000"
    """
    return _bits_to_octets(format(mask_for_prefix(prefix), "032b"))
