#!/usr/bin/env python3
"""
Tests for table construction, validation and the length-bucketed index.
"""

from dataclasses import FrozenInstanceError

import pytest

from kannada_utils import (
    BrokenCase,
    LengthBucketedIndex,
    MappingConfigurationError,
    build_mapping_tables,
    create_reverse_mapping,
)


def _tables(**overrides):
    sections = dict(
        mapping={'k': 'ಕ', 'kf': 'ಕಾ'},
        broken_cases={'I': {'value': 'ೀ'}},
        vattaksharagalu={'N': 'ನ'},
        ascii_arkavattu={'R': 'ರ'},
        dependent_vowels=['ಾ', 'ೀ'],
        ignore_list=['#'],
    )
    sections.update(overrides)
    return build_mapping_tables(**sections)


# =============================================================================
# LengthBucketedIndex
# =============================================================================

def test_longest_match_prefers_longer_key():
    index = LengthBucketedIndex({'a': '1', 'ab': '2', 'abc': '3'})

    assert index.longest_match('abcd', 0) == ('3', 3)
    assert index.longest_match('abd', 0) == ('2', 2)
    assert index.longest_match('ad', 0) == ('1', 1)
    assert index.longest_match('xa', 0) is None
    assert index.longest_match('xab', 1) == ('2', 2)


def test_longest_match_near_end_of_text():
    index = LengthBucketedIndex({'abc': '3', 'b': '1'})
    assert index.longest_match('ab', 1) == ('1', 1)
    assert index.longest_match('ab', 2) is None


def test_index_introspection():
    index = LengthBucketedIndex({'a': '1', 'ab': '2', 'abcde': '5'})

    assert index.max_len == 5
    assert len(index) == 3
    assert 'ab' in index
    assert 'abc' not in index
    assert index.lookup('xxab', 2, 2) == '2'


def test_empty_index():
    index = LengthBucketedIndex({})
    assert index.max_len == 0
    assert index.longest_match('abc', 0) is None


# =============================================================================
# Reverse mapping
# =============================================================================

def test_reverse_mapping_longest_key_wins():
    forward = {'Ä': 'ು', 'Å': 'ು', 'PÀ': 'ಕ', 'PÀÀ': 'ಕ'}
    reverse = create_reverse_mapping(forward)

    assert reverse['ಕ'] == 'PÀÀ'
    # Equal length: first in table order
    assert reverse['ು'] == 'Ä'


def test_reverse_mapping_derived_when_not_given():
    tables = _tables()
    assert dict(tables.reverse_mapping) == {'ಕ': 'k', 'ಕಾ': 'kf'}


def test_explicit_reverse_mapping_kept():
    tables = _tables(reverse_mapping={'ಕ': 'K'})
    assert dict(tables.reverse_mapping) == {'ಕ': 'K'}


# =============================================================================
# Validation
# =============================================================================

def test_invalid_tables_rejected():
    test_cases = [
        (dict(mapping={}), "empty forward table"),
        (dict(mapping={'abcdef': 'ಕ'}), "forward key longer than 5 characters"),
        (dict(mapping={'': 'ಕ'}), "empty forward key"),
        (dict(mapping={'k': 1}), "non-string value"),
        (dict(mapping=['k']), "forward table not a mapping"),
        (dict(vattaksharagalu={'NN': 'ನ'}), "multi-character geminate trigger"),
        (dict(ascii_arkavattu={'RR': 'ರ'}), "multi-character arkavattu trigger"),
        (dict(broken_cases={'II': {'value': 'ೀ'}}), "multi-character broken trigger"),
        (dict(broken_cases={'I': {}}), "broken case with no value and no mapping"),
        (dict(broken_cases={'I': 'ೀ'}), "broken case not an object"),
        (dict(broken_cases={'I': {'mapping': {'ಿ': 2}}}), "broken context value not a string"),
        (dict(ignore_list='#'), "ignore list given as a string"),
        (dict(ignore_list=['##']), "multi-character ignore entry"),
        (dict(dependent_vowels=None), "missing dependent vowels"),
        (dict(dependent_vowels=[['ಾ']]), "unhashable dependent vowel"),
    ]

    for sections, description in test_cases:
        with pytest.raises(MappingConfigurationError):
            _tables(**sections)
            pytest.fail(description)


def test_broken_case_objects_accepted():
    tables = _tables(broken_cases={'I': BrokenCase(mapping={'ಿ': 'ೀ'})})
    assert tables.broken_cases['I'].value is None
    assert tables.broken_cases['I'].mapping['ಿ'] == 'ೀ'


def test_five_character_key_allowed():
    tables = _tables(mapping={'gÀhiï': 'ಝ್'})
    assert tables.ascii_index.max_len == 5


# =============================================================================
# Immutability
# =============================================================================

def test_tables_are_read_only():
    tables = _tables()

    with pytest.raises(TypeError):
        tables.mapping['x'] = 'ಕ'
    with pytest.raises(TypeError):
        tables.broken_cases['I'].mapping['ೆ'] = 'ೇ'
    with pytest.raises(FrozenInstanceError):
        tables.mapping = {}


def test_source_dicts_can_change_after_build():
    mapping = {'k': 'ಕ'}
    tables = _tables(mapping=mapping)
    mapping['n'] = 'ನ'

    assert 'n' not in tables.mapping
    assert 'n' not in tables.ascii_index


def test_with_overrides_without_overrides_returns_same_tables():
    tables = _tables()
    assert tables.with_overrides() is tables
    assert tables.with_overrides({}, {}) is tables


def test_with_overrides_leaves_original_untouched():
    tables = _tables()
    merged = tables.with_overrides(ascii_overrides={'n': 'ನ'})

    assert merged.mapping['n'] == 'ನ'
    assert merged.reverse_mapping['ನ'] == 'n'
    assert 'n' in merged.ascii_index
    assert 'n' not in tables.mapping
