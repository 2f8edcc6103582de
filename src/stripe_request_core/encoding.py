"""Stripe-style encoding of request parameters.

Stripe accepts nested parameters in bracket notation for both query strings and
form bodies:

    {"metadata": {"order": "42"}, "expand": ["charge"], "limit": 3}
    -> metadata[order]=42&expand[0]=charge&limit=3
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from urllib.parse import urlencode

type ParamPairs = tuple[tuple[str, str], ...]


def _scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _flatten(prefix: str, value: object, out: list[tuple[str, str]]) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            _flatten(f"{prefix}[{key}]", item, out)
        return
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        for index, item in enumerate(value):
            _flatten(f"{prefix}[{index}]", item, out)
        return
    out.append((prefix, _scalar(value)))


def encode_params(params: Mapping[str, object]) -> ParamPairs:
    """Flatten a parameter mapping into ordered key/value pairs.

    `None` values are dropped so optional parameters can be passed through as-is.
    An empty mapping at the top level of a key (e.g. `metadata={}`) is sent as an
    empty value, which Stripe treats as "unset".
    """
    out: list[tuple[str, str]] = []
    for key, value in params.items():
        if isinstance(value, Mapping) and not value:
            out.append((key, ""))
            continue
        _flatten(key, value, out)
    return tuple(out)


def urlencode_pairs(pairs: ParamPairs) -> str:
    return urlencode(pairs)
