"""Global rendering notation.

The notation used by str(pattern) comes from, in order: a process-wide
override set with set_notation(), the KLEENE_NOTATION Django setting, and
finally POSIX. The module works without a configured settings module.
"""
from contextlib import contextmanager
from typing import Iterator, Optional, Union

from django.conf import settings

from .notation import Notation

DEFAULT_NOTATION = Notation.POSIX

_override: Optional[Notation] = None


def configured_notation() -> Notation:
    """Return the notation named by settings.KLEENE_NOTATION, or the default."""
    if not settings.configured:
        return DEFAULT_NOTATION
    name = getattr(settings, 'KLEENE_NOTATION', None)
    if not name:
        return DEFAULT_NOTATION
    return Notation.from_name(name)


def get_notation() -> Notation:
    if _override is not None:
        return _override
    return configured_notation()


def set_notation(notation: Optional[Union[Notation, str]]) -> None:
    """Swap the global notation. Passing None restores the configured one."""
    global _override
    _override = None if notation is None else Notation.from_name(notation)


@contextmanager
def notation_override(notation: Optional[Union[Notation, str]]) -> Iterator[Notation]:
    """Temporarily render with `notation`, restoring the previous choice on exit."""
    global _override
    previous = _override
    set_notation(notation)
    try:
        yield get_notation()
    finally:
        _override = previous
