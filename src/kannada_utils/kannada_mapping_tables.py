#!/usr/bin/env python3
"""
Kannada Mapping Tables
======================

Immutable lookup tables shared by every conversion:

- mapping: legacy (Nudi/Baraha) key → Unicode value
- reverse_mapping: Unicode value → legacy key (derived, longest key wins)
- vattaksharagalu: geminate trigger → consonant joined with a halant
- ascii_arkavattu: Ra-compound trigger → Ra form
- broken_cases: ambiguous vowel trigger → default value + context mapping
- dependent_vowels: Unicode vowel signs
- ignore_list: legacy characters dropped without output

Tables are built once and never mutated, so one MappingTables object can be
handed to any number of converters and threads.
"""

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from .errors import MappingConfigurationError

logger = logging.getLogger(__name__)


HALANT = '\u0CCD'  # virama
ZWJ = '\u200D'
ZWNJ = '\u200C'

MAX_ASCII_KEY_LENGTH = 5


@dataclass(frozen=True)
class BrokenCase:
    """Ambiguous legacy vowel sign resolved from the preceding output letter."""
    value: Optional[str] = None
    mapping: Mapping[str, str] = field(default_factory=dict)


class LengthBucketedIndex:
    """
    Exact-match index over table keys, bucketed by key length.

    Matching is ordinal; keys are never normalized.
    """

    def __init__(self, table: Mapping[str, str]):
        buckets: Dict[int, Dict[str, str]] = {}
        for key, value in table.items():
            buckets.setdefault(len(key), {})[key] = value

        self._buckets = MappingProxyType(
            {length: MappingProxyType(bucket) for length, bucket in buckets.items()}
        )
        self.max_len = max(buckets, default=0)

    def lookup(self, text: str, start: int, length: int) -> Optional[str]:
        bucket = self._buckets.get(length)
        if bucket is None:
            return None
        return bucket.get(text[start:start + length])

    def longest_match(self, text: str, start: int) -> Optional[Tuple[str, int]]:
        """
        Find the longest key that matches text at start.

        Returns:
            (mapped value, matched length) or None when nothing matches
        """
        for length in range(min(self.max_len, len(text) - start), 0, -1):
            mapped = self.lookup(text, start, length)
            if mapped is not None:
                return mapped, length
        return None

    def __contains__(self, key: str) -> bool:
        bucket = self._buckets.get(len(key))
        return bucket is not None and key in bucket

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())


def create_reverse_mapping(forward_mapping: Mapping[str, str]) -> Dict[str, str]:
    """
    Invert the legacy → Unicode table.

    Entries are visited by descending legacy key length and the first key seen
    for a Unicode value is kept, so the longest legacy spelling wins. Keys of
    equal length keep the iteration order of forward_mapping (the sort is
    stable), which for tables loaded from JSON is the order in the file.
    """
    reverse: Dict[str, str] = {}
    for ascii_key, unicode_value in sorted(forward_mapping.items(), key=lambda kv: -len(kv[0])):
        if unicode_value not in reverse:
            reverse[unicode_value] = ascii_key
    return reverse


@dataclass(frozen=True)
class MappingTables:
    """Complete, validated table set for one legacy encoding."""
    mapping: Mapping[str, str]
    reverse_mapping: Mapping[str, str]
    vattaksharagalu: Mapping[str, str]
    ascii_arkavattu: Mapping[str, str]
    broken_cases: Mapping[str, BrokenCase]
    dependent_vowels: FrozenSet[str]
    ignore_list: FrozenSet[str]
    ascii_index: LengthBucketedIndex = field(init=False, repr=False, compare=False)
    unicode_index: LengthBucketedIndex = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'ascii_index', LengthBucketedIndex(self.mapping))
        object.__setattr__(self, 'unicode_index', LengthBucketedIndex(self.reverse_mapping))

    def with_overrides(self,
                       ascii_overrides: Optional[Mapping[str, str]] = None,
                       unicode_overrides: Optional[Mapping[str, str]] = None) -> 'MappingTables':
        """
        Return a new table set with caller overrides merged on top.

        ascii_overrides are merged over the forward table and the reverse table
        is re-derived from the result; unicode_overrides are then merged over
        that reverse table. Override values win on key collision.
        """
        if not ascii_overrides and not unicode_overrides:
            return self

        mapping = dict(self.mapping)
        if ascii_overrides:
            _validate_string_map('ascii_overrides', ascii_overrides,
                                 max_key_length=MAX_ASCII_KEY_LENGTH)
            mapping.update(ascii_overrides)
            reverse = create_reverse_mapping(mapping)
        else:
            reverse = dict(self.reverse_mapping)

        if unicode_overrides:
            _validate_string_map('unicode_overrides', unicode_overrides)
            reverse.update(unicode_overrides)

        logger.debug(f"Applied overrides: {len(ascii_overrides or {})} ASCII, "
                     f"{len(unicode_overrides or {})} Unicode")

        return replace(self, mapping=MappingProxyType(mapping),
                       reverse_mapping=MappingProxyType(reverse))


# ============================================================================
# VALIDATION & CONSTRUCTION
# ============================================================================

def _validate_string_map(name: str,
                         table: Any,
                         single_char_keys: bool = False,
                         max_key_length: Optional[int] = None) -> None:
    if not isinstance(table, Mapping):
        raise MappingConfigurationError(f"Table '{name}' must be a mapping, got {type(table).__name__}")

    for key, value in table.items():
        if not isinstance(key, str) or not key:
            raise MappingConfigurationError(f"Table '{name}' has an empty or non-string key: {key!r}")
        if not isinstance(value, str):
            raise MappingConfigurationError(f"Table '{name}' key {key!r} maps to non-string {value!r}")
        if single_char_keys and len(key) != 1:
            raise MappingConfigurationError(f"Table '{name}' trigger {key!r} must be a single character")
        if max_key_length is not None and len(key) > max_key_length:
            raise MappingConfigurationError(
                f"Table '{name}' key {key!r} is longer than {max_key_length} characters"
            )


def _freeze_string_set(name: str, items: Any, single_char: bool = False) -> FrozenSet[str]:
    if items is None or isinstance(items, (str, Mapping)):
        raise MappingConfigurationError(f"Table '{name}' must be a collection of strings")

    try:
        frozen = frozenset(items)
    except TypeError as e:
        raise MappingConfigurationError(f"Table '{name}' must be a collection of strings: {e}") from e

    for item in frozen:
        if not isinstance(item, str) or not item:
            raise MappingConfigurationError(f"Table '{name}' has an empty or non-string entry: {item!r}")
        if single_char and len(item) != 1:
            raise MappingConfigurationError(f"Table '{name}' entry {item!r} must be a single character")
    return frozen


def _build_broken_case(trigger: str, entry: Any) -> BrokenCase:
    if isinstance(entry, BrokenCase):
        value, mapping = entry.value, entry.mapping
    elif isinstance(entry, Mapping):
        value, mapping = entry.get('value'), entry.get('mapping')
    else:
        raise MappingConfigurationError(f"Broken case {trigger!r} must be an object, got {entry!r}")

    if value is not None and not isinstance(value, str):
        raise MappingConfigurationError(f"Broken case {trigger!r} has a non-string value: {value!r}")
    if mapping is None:
        mapping = {}
    _validate_string_map(f"brokenCases.{trigger}.mapping", mapping)

    if not value and not mapping:
        raise MappingConfigurationError(
            f"Broken case {trigger!r} needs a default value or a context mapping"
        )

    return BrokenCase(value=value or None, mapping=MappingProxyType(dict(mapping)))


def build_mapping_tables(mapping: Mapping[str, str],
                         broken_cases: Mapping[str, Any],
                         vattaksharagalu: Mapping[str, str],
                         ascii_arkavattu: Mapping[str, str],
                         dependent_vowels: Iterable[str],
                         ignore_list: Iterable[str],
                         reverse_mapping: Optional[Mapping[str, str]] = None) -> MappingTables:
    """
    Validate already-parsed tables and freeze them into a MappingTables.

    Args:
        mapping: Legacy key → Unicode value (keys 1-5 characters)
        broken_cases: Trigger → BrokenCase or {"value": ..., "mapping": {...}}
        vattaksharagalu: Geminate trigger → consonant
        ascii_arkavattu: Ra-compound trigger → Ra form
        dependent_vowels: Unicode dependent vowel signs
        ignore_list: Legacy characters consumed without output
        reverse_mapping: Optional explicit Unicode → legacy table
                         (default: derived with create_reverse_mapping)

    Raises:
        MappingConfigurationError: If any table is missing or malformed
    """
    _validate_string_map('mapping', mapping, max_key_length=MAX_ASCII_KEY_LENGTH)
    if not mapping:
        raise MappingConfigurationError("Table 'mapping' must not be empty")
    _validate_string_map('vattaksharagalu', vattaksharagalu, single_char_keys=True)
    _validate_string_map('asciiArkavattu', ascii_arkavattu, single_char_keys=True)

    if not isinstance(broken_cases, Mapping):
        raise MappingConfigurationError("Table 'brokenCases' must be a mapping")
    frozen_broken = {}
    for trigger, entry in broken_cases.items():
        if not isinstance(trigger, str) or len(trigger) != 1:
            raise MappingConfigurationError(f"Broken case trigger {trigger!r} must be a single character")
        frozen_broken[trigger] = _build_broken_case(trigger, entry)

    vowels = _freeze_string_set('dependentVowels', dependent_vowels)
    ignored = _freeze_string_set('ignoreList', ignore_list, single_char=True)

    if reverse_mapping is None:
        reverse_mapping = create_reverse_mapping(mapping)
    else:
        _validate_string_map('reverseMapping', reverse_mapping)

    tables = MappingTables(
        mapping=MappingProxyType(dict(mapping)),
        reverse_mapping=MappingProxyType(dict(reverse_mapping)),
        vattaksharagalu=MappingProxyType(dict(vattaksharagalu)),
        ascii_arkavattu=MappingProxyType(dict(ascii_arkavattu)),
        broken_cases=MappingProxyType(frozen_broken),
        dependent_vowels=vowels,
        ignore_list=ignored,
    )

    logger.debug(f"Built mapping tables: {len(tables.mapping)} forward entries "
                 f"(max key length {tables.ascii_index.max_len}), "
                 f"{len(tables.reverse_mapping)} reverse entries, "
                 f"{len(tables.vattaksharagalu)} vattakshara, {len(tables.ascii_arkavattu)} arkavattu, "
                 f"{len(tables.broken_cases)} broken cases")
    return tables
