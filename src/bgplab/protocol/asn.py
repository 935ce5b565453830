"""AS number parsing and classification."""

from bgplab.protocol.types import ASClass

MAX_AS_NUMBER = 0xFFFFFFFF
MAX_PUBLIC_16 = 64511
MIN_PRIVATE_16 = 64512
MAX_PRIVATE_16 = 65534
RESERVED_AS_NUMBERS = frozenset({0, 65535})
MIN_FOUR_BYTE = 65536


def classify(as_number: int | None) -> ASClass:
    """
    Classify an AS number.

    Total function: any value that is not an integer in the 32-bit range
    classifies as INVALID.

    Args:
        as_number: AS number, or None when absent

    Returns:
        AS class
    """
    if isinstance(as_number, bool) or not isinstance(as_number, int):
        return ASClass.INVALID
    if as_number in RESERVED_AS_NUMBERS:
        return ASClass.RESERVED
    if 1 <= as_number <= MAX_PUBLIC_16:
        return ASClass.PUBLIC_16
    if MIN_PRIVATE_16 <= as_number <= MAX_PRIVATE_16:
        return ASClass.PRIVATE_16
    if MIN_FOUR_BYTE <= as_number <= MAX_AS_NUMBER:
        return ASClass.FOUR_BYTE
    return ASClass.INVALID


def is_usable(as_class: ASClass) -> bool:
    """Whether an AS of this class may run a BGP session."""
    return as_class not in (ASClass.INVALID, ASClass.RESERVED)


def parse_as_number(value: object) -> int | None:
    """
    Parse user input into an AS number.

    Args:
        value: Integer or decimal text

    Returns:
        AS number, or None if the input is not a non-negative 32-bit integer
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not text or not text.isascii() or not text.isdigit():
            return None
        number = int(text)
    else:
        return None

    if not 0 <= number <= MAX_AS_NUMBER:
        return None
    return number
