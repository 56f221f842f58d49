"""Runtime value helpers for tlox.

tlox has four primitive kinds plus callables, all represented by plain
Python objects:

    nil       -> None
    boolean   -> bool
    number    -> float
    string    -> str
    function  -> a `LoxCallable`

These helpers implement the language's rules on top of them. Python's own
rules differ in ways that matter here: `0` and `""` are falsy in Python
but truthy in tlox, and `1.0 == True` holds in Python but not in tlox.
"""

from __future__ import annotations

from typing import Any


def is_truthy(value: Any) -> bool:
    """Only nil and false are falsy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    """Value equality with no cross-kind coercion."""
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    if type(a) is not type(b):
        return False
    return a == b


def is_number(value: Any) -> bool:
    # bool is an int subclass, never a float, so this excludes true/false
    return isinstance(value, float)


def type_name(value: Any) -> str:
    """Return the tlox kind name of a runtime value."""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    return 'function'


def stringify(value: Any) -> str:
    """Convert a tlox value to the text `print` shows for it.

    Integral numbers drop their fractional part so that `print 3;` shows
    `3` rather than Python's `3.0`.
    """
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)
