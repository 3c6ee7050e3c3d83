from typing import Sequence
from stmtsense.data.constants import FINGERPRINT_SEPARATOR

def build_fingerprint(headers: Sequence[str]) -> str:
    """Lower-cased headers joined in order. Same header row, same fingerprint."""
    return FINGERPRINT_SEPARATOR.join(h.lower() for h in headers)
