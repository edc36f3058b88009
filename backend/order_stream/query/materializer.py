"""
Result Materializer

Shape conversion at the boundary to the caller: a sequence, a mapping, a
scalar, plain records or a DataFrame. Nothing here filters or aggregates.

Author: TM3
Date: 2025-10-17
"""
from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

from order_stream.query.pipeline import Pipeline


def _unwrap(result: Any) -> Any:
    if isinstance(result, Pipeline):
        return result.to_list()
    return result


def _plain(value: Any) -> Any:
    """Entities and statistics become dicts; everything else passes through"""
    to_dict = getattr(value, 'to_dict', None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def _key_of(key: Any) -> Any:
    """Entity keys are replaced by their id so the mapping stays hashable"""
    return getattr(key, 'id', key)


def to_sequence(result: Any) -> List[Any]:
    return list(_unwrap(result))


def to_mapping(result: Mapping[Any, Any]) -> Dict[Any, Any]:
    return {_key_of(key): value for key, value in result.items()}


def to_scalar(result: Any) -> Any:
    """
    A single value

    A one-element sequence is unwrapped; anything longer is a caller error.
    """
    result = _unwrap(result)
    if isinstance(result, (list, tuple)):
        if len(result) != 1:
            raise ValueError(f"Expected exactly one value, got {len(result)}")
        return result[0]
    return result


def to_records(result: Any) -> Any:
    """
    JSON-friendly rendering

    Sequences become lists of dicts and mappings dicts of plain values,
    with Decimal prices turned into floats by each entity's to_dict().
    """
    result = _unwrap(result)
    if isinstance(result, Mapping):
        return {_key_of(key): _plain(value) for key, value in result.items()}
    if isinstance(result, Iterable) and not isinstance(result, (str, bytes)):
        return [_plain(item) for item in result]
    return _plain(result)


def to_dataframe(result: Any) -> pd.DataFrame:
    """
    Tabular rendering of a sequence of entities or of a mapping

    A mapping becomes two columns, key and value, unless its values are
    entities or dicts, in which case each value is a row and the key is
    kept in a 'key' column.
    """
    result = _unwrap(result)
    if isinstance(result, Mapping):
        rows = []
        for key, value in result.items():
            plain = _plain(value)
            if isinstance(plain, dict):
                rows.append({'key': _key_of(key), **plain})
            else:
                rows.append({'key': _key_of(key), 'value': plain})
        return pd.DataFrame(rows)
    return pd.DataFrame([_plain(item) for item in result])
