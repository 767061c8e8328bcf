"""
In-memory Plaid access token holder.
Single-user demo storage: the token lives only as long as the process.
"""
import threading
from typing import Optional

_lock = threading.Lock()
_access_token: Optional[str] = None


def set_access_token(token: str) -> None:
    global _access_token
    with _lock:
        _access_token = token


def get_access_token() -> Optional[str]:
    with _lock:
        return _access_token


def clear_access_token() -> None:
    global _access_token
    with _lock:
        _access_token = None
