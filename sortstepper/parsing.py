import logging
import math
import re

logger = logging.getLogger(__name__)

# same literals a browser's Number() accepts: ASCII decimals with optional
# exponent, and unsigned 0x / 0o / 0b integers; no digit separators
DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
INTEGER = re.compile(r"[+-]?[0-9]+")
PREFIXED = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")


def parse_number(token: str):
    """Return ``token`` as an int or float, or None if it is not a finite number."""
    token = token.strip()
    if PREFIXED.fullmatch(token):
        return int(token, 0)
    if INTEGER.fullmatch(token):
        return int(token)
    if not DECIMAL.fullmatch(token):
        return None
    value = float(token)
    if not math.isfinite(value):
        return None
    return value


def parse_values(text: str) -> list:
    """Parse comma-separated free text into numbers, dropping anything that isn't one."""
    values = []
    for token in (text or "").split(","):
        value = parse_number(token)
        if value is None:
            if token.strip():
                logger.debug("dropping non-numeric token %r", token.strip())
            continue
        values.append(value)
    return values
