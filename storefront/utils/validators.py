import re
from typing import Any

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

def is_non_empty_string(v: Any) -> bool:
    return isinstance(v, str) and len(v.strip()) > 0

def is_valid_email(v: Any) -> bool:
    if not isinstance(v, str):
        return False
    return EMAIL_RE.match(v.strip()) is not None
