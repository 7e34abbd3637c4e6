"""
Lookup context management using ContextVar for async-safe context propagation.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

# Key of the lookup being served, e.g. "stock:AAPL"; each gathered task gets its own copy
current_lookup: ContextVar[Optional[str]] = ContextVar('current_lookup', default=None)


def get_current_lookup() -> Optional[str]:
    """Get the current lookup key from the context."""
    return current_lookup.get()


@contextmanager
def lookup_context(key: str) -> Iterator[None]:
    """Set the current lookup key for the duration of the block."""
    token = current_lookup.set(key)
    try:
        yield
    finally:
        current_lookup.reset(token)
