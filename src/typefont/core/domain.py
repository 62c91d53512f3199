# -*- coding: utf-8 -*-
"""
src/typefont/core/domain.py

Restricts two character-keyed mappings to the characters they share, so only
commensurable glyphs are compared.
"""

from typing import Dict, FrozenSet, Iterable, Mapping, MutableMapping, TypeVar

V = TypeVar("V")


def common_keys(first: Mapping[str, object], second: Mapping[str, object]) -> FrozenSet[str]:
    """Characters present in both mappings. Neither argument is modified."""
    return frozenset(first.keys() & second.keys())


def restrict(mapping: Mapping[str, V], keys: Iterable[str]) -> Dict[str, V]:
    """A new dict holding only `keys` from `mapping`."""
    return {key: mapping[key] for key in keys if key in mapping}


def reduce_to_common_domain(first: MutableMapping[str, object], second: MutableMapping[str, object]) -> None:
    """
    Removes, in place, every key that is missing from the other mapping.

    Afterwards both key sets equal their original intersection. Running it
    again on a reduced pair changes nothing. Only use this on mappings the
    caller owns outright; concurrent evaluations should use `common_keys`
    and `restrict` instead.
    """
    shared = common_keys(first, second)
    for mapping in (first, second):
        for key in [k for k in mapping if k not in shared]:
            del mapping[key]
