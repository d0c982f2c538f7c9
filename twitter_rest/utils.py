"""
Utility Functions
Parameter handling helpers shared by the signer, the pipeline and the client.
"""

from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple
from urllib.parse import quote

Params = Dict[str, List[str]]


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def normalize_params(params: Optional[Mapping[str, Any]]) -> Params:
    """
    Turn a caller parameter mapping into a key -> list-of-values set.

    Args:
        params: Mapping whose values are scalars or lists/tuples of scalars.
            None values are dropped.

    Returns:
        A new dict; an empty one when params is None
    """
    normalized: Params = {}
    if not params:
        return normalized
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            normalized[key] = [_as_text(v) for v in value if v is not None]
        else:
            normalized[key] = [_as_text(value)]
    return normalized


def merge_params(defaults: Optional[Mapping[str, Any]], overrides: Optional[Mapping[str, Any]]) -> Params:
    """
    Merge caller overrides into default parameters.

    A key present in both takes the override's values (last write wins,
    never appended); every other key is kept from whichever side has it.
    """
    merged = normalize_params(defaults)
    merged.update(normalize_params(overrides))
    return merged


def iter_pairs(params: Params) -> Iterator[Tuple[str, str]]:
    for key, values in params.items():
        for value in values:
            yield key, value


def percent_encode(value: Any) -> str:
    """Percent-encode per RFC 3986, leaving only unreserved characters."""
    return quote(_as_text(value), safe="~")


def encode_params(params: Params) -> str:
    """Form/query encode a parameter set, keys sorted for a stable wire form."""
    return "&".join(
        f"{percent_encode(k)}={percent_encode(v)}"
        for k, v in sorted(iter_pairs(params))
    )


def combine_params(*param_sets: Optional[Params]) -> Params:
    """Union of several parameter sets; values of a repeated key are concatenated."""
    combined: Params = {}
    for params in param_sets:
        for key, values in (params or {}).items():
            combined.setdefault(key, []).extend(values)
    return combined
