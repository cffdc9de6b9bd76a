"""Canonical county keys and composite geographic identifiers."""

from typing import Tuple

from .config import CLAIMS_KEY_SUFFIX, COMPOSITE_ID_WIDTHS
from .errors import ConfigurationError


def normalize_claims_key(raw: str, suffix: str = CLAIMS_KEY_SUFFIX) -> str:
    """Strip the trailing state suffix from a claims county name.

    ``"Douglas County, NE"`` becomes ``"Douglas"``; names without the
    suffix are returned unchanged (apart from surrounding whitespace).
    """
    key = str(raw).strip()
    if suffix and key.endswith(suffix):
        return key[: -len(suffix)].strip()
    return key


def _validate_code(code: str, width: int, name: str) -> str:
    text = str(code).strip()
    if len(text) != width or not text.isdigit():
        raise ConfigurationError(
            f"{name} code must be exactly {width} digits, got {code!r}."
        )
    return text


def build_composite_id(
    part_a: str,
    part_b: str,
    widths: Tuple[int, int] = COMPOSITE_ID_WIDTHS,
) -> str:
    """Concatenate a state code and a county code into one identifier.

    The parts are joined without a separator, so both must already be
    fixed-width digit strings (``"31"`` + ``"055"`` -> ``"31055"``).  Codes
    are not zero-padded here: a short code means the source lost its
    leading zeros and is reported instead of guessed.

    Raises
    ------
    ConfigurationError
        If either part has the wrong width or contains non-digits.
    """
    width_a, width_b = widths
    return _validate_code(part_a, width_a, "State") + _validate_code(
        part_b, width_b, "County"
    )
