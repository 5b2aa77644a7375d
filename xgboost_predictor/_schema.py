# _schema.py
"""Typed access to the members of a parsed JSON model document.

Every accessor takes a JSON object (a ``dict`` as produced by :mod:`json`)
and a member name, and either returns the member converted to the requested
type or raises :class:`SchemaError` naming the offending member.

Booleans and numbers are kept apart: ``true`` is never accepted where an
integer is expected and ``1`` is never accepted as a boolean. Float arrays
accept integral numerals as well, since models may write integral split
thresholds without a decimal point.
"""

import numpy as np

from ._errors import SchemaError

DTYPE = np.float32
INT_DTYPE = np.int64

# json ints are read as 32-bit signed integers
INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


def _member(value, key):
    if not isinstance(value, dict):
        raise SchemaError(
            "expected a json object holding member %r, got %s"
            % (key, type(value).__name__))
    if key not in value:
        raise SchemaError("missing json member: %s" % key)
    return value[key]


def _is_int(item):
    return isinstance(item, int) and not isinstance(item, bool)


def _is_number(item):
    return isinstance(item, (int, float)) and not isinstance(item, bool)


def get_object(value, key):
    """Return the object member `key` of `value`."""
    member = _member(value, key)
    if not isinstance(member, dict):
        raise SchemaError("missing or invalid json object member: %s" % key)
    return member


def get_array(value, key):
    """Return the array member `key` of `value` as a list."""
    member = _member(value, key)
    if not isinstance(member, list):
        raise SchemaError("missing or invalid json array member: %s" % key)
    return member


def get_bool_array(value, key):
    """Return the array member `key` as a numpy bool array."""
    items = get_array(value, key)
    for item in items:
        if not isinstance(item, bool):
            raise SchemaError("%s json array member is not bool" % key)
    return np.array(items, dtype=np.bool_)


def get_int_array(value, key):
    """Return the array member `key` as a numpy int64 array."""
    items = get_array(value, key)
    for item in items:
        if not _is_int(item):
            raise SchemaError("%s json array member is not int" % key)
        if not INT_MIN <= item <= INT_MAX:
            raise SchemaError("%s json array member is out of range" % key)
    return np.array(items, dtype=INT_DTYPE)


def get_float_array(value, key):
    """Return the array member `key` as a numpy float32 array.

    Both integral and floating point members are accepted. Members that
    are not finite in single precision are rejected.
    """
    items = get_array(value, key)
    for item in items:
        if not _is_number(item):
            raise SchemaError("%s json array member is not double/int" % key)

    try:
        with np.errstate(over='ignore'):
            result = np.array(items, dtype=DTYPE)
    except OverflowError as err:
        raise SchemaError("%s json array member is out of range" % key) from err

    if not np.all(np.isfinite(result)):
        raise SchemaError("%s json array member is out of range" % key)
    return result


def get_string(value, key):
    """Return the string member `key` of `value`."""
    member = _member(value, key)
    if not isinstance(member, str):
        raise SchemaError("missing or invalid json string member: %s" % key)
    return member
