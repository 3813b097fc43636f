"""Ordered, lazily evaluated priority chains."""
from typing import Callable, Iterable, Optional, Tuple

Provider = Tuple[str, Callable[[], Optional[str]]]


def first_available(providers: Iterable[Provider]) -> Tuple[Optional[str], Optional[str]]:
    """
    Evaluate providers in order and stop at the first non-empty value.

    Each provider is a ``(source_name, callable)`` pair. Callables after the
    winning one are never invoked.

    Returns:
        ``(source_name, value)`` of the winner, or ``(None, None)``.
    """
    for source, provider in providers:
        value = provider()
        if value:
            return source, value
    return None, None
