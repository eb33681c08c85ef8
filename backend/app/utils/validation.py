"""Symbol validation and sanitization utilities.

Every user-supplied symbol list enters the system through ``clean_symbols``.
"""
import re

MAX_SYMBOL_LENGTH = 20
EXCHANGE_PREFIX = "NSE:"

# Newlines, semicolons and commas all separate symbols in pasted input
_SEPARATORS = re.compile(r"[,;\n]")


def normalize_symbol(symbol: str) -> str:
    """
    Normalize a symbol to uppercase and stripped, without an exchange prefix.

    Args:
        symbol: The symbol to normalize

    Returns:
        Uppercase, stripped symbol ("nse:infy " -> "INFY")
    """
    cleaned = symbol.strip().upper()
    if cleaned.startswith(EXCHANGE_PREFIX):
        cleaned = cleaned[len(EXCHANGE_PREFIX):].strip()
    return cleaned


def clean_symbols(input_text: str) -> list[str]:
    """
    Turn free-form pasted text into a deduplicated list of symbols.

    Tokens are separated by commas, semicolons or newlines. Each token is
    trimmed, uppercased and stripped of a leading ``NSE:`` prefix; empty
    tokens are dropped and the first occurrence of each symbol wins.

    Args:
        input_text: Raw text, e.g. "nse:ABC, abc,  DEF\\nghi;ghi"

    Returns:
        Ordered unique symbols, e.g. ["ABC", "DEF", "GHI"]
    """
    if not input_text:
        return []

    tokens = (normalize_symbol(token) for token in _SEPARATORS.split(input_text))
    return list(dict.fromkeys(token for token in tokens if token))


def is_valid_symbol(symbol: str) -> bool:
    """
    Validate NSE symbol format.

    Allows:
    - Alphanumeric characters (A-Z, 0-9)
    - Ampersands (&) as in M&M
    - Hyphens (-) as in BAJAJ-AUTO
    - Periods (.) and underscores (_) used by some listings

    Args:
        symbol: The symbol to validate (should already be normalized)

    Returns:
        True if symbol format is valid, False otherwise
    """
    if not symbol or len(symbol) > MAX_SYMBOL_LENGTH:
        return False
    # Remove allowed special characters and check if remainder is alphanumeric
    cleaned = symbol.replace("&", "").replace("-", "").replace(".", "").replace("_", "")
    return cleaned.isalnum()
