#!/usr/bin/env python3
"""
Tests for loading the persisted mapping tables.
"""

import json

import pytest

from kannada_utils import (
    HALANT,
    KannadaConverter,
    MappingConfigurationError,
    load_default_mapping_tables,
    load_mapping_tables,
)
from kannada_utils.mapping_loader import parse_mapping_document


MINIMAL_DOCUMENT = {
    "mapping": {"k": "ಕ"},
    "numbersMapping": {"1": "೧"},
    "brokenCases": {},
    "dependentVowels": ["ಾ"],
    "vattaksharagalu": {},
    "asciiArkavattu": {},
    "ignoreList": [],
}


def _write(tmp_path, document, name="mapping.json"):
    path = tmp_path / name
    path.write_text(json.dumps(document, ensure_ascii=False), encoding='utf-8')
    return path


def test_bundled_tables_load(default_tables):
    assert default_tables.mapping['PÀ'] == 'ಕ'
    assert default_tables.mapping['ï'] == HALANT
    assert default_tables.ascii_arkavattu['ð'] == 'ರ'
    assert default_tables.vattaksharagalu['ß'] == 'ನ'
    assert 'Ã' in default_tables.broken_cases
    assert HALANT not in default_tables.dependent_vowels
    assert default_tables.ascii_index.max_len <= 5


def test_default_tables_are_cached():
    assert load_default_mapping_tables() is load_default_mapping_tables()


def test_digits_only_when_enabled():
    assert '1' not in load_mapping_tables(kannada_digits=False).mapping

    tables = load_mapping_tables(kannada_digits=True)
    assert KannadaConverter(tables).ascii_to_unicode("PÀ 2024") == "ಕ ೨೦೨೪"


def test_digits_from_environment(monkeypatch):
    monkeypatch.setenv('KANNADA_DIGITS', 'true')
    assert load_mapping_tables().mapping['9'] == '೯'

    # Explicit argument wins over the environment
    assert '9' not in load_mapping_tables(kannada_digits=False).mapping


def test_custom_mapping_file(tmp_path):
    path = _write(tmp_path, MINIMAL_DOCUMENT)
    tables = load_mapping_tables(path)

    assert dict(tables.mapping) == {"k": "ಕ"}
    assert KannadaConverter(tables).ascii_to_unicode("k1") == "ಕ1"


def test_mapping_file_from_environment(tmp_path, monkeypatch):
    path = _write(tmp_path, MINIMAL_DOCUMENT)
    monkeypatch.setenv('KANNADA_MAPPING_FILE', str(path))
    monkeypatch.setenv('KANNADA_DIGITS', 'yes')

    tables = load_mapping_tables()
    assert dict(tables.mapping) == {"k": "ಕ", "1": "೧"}


def test_default_tables_ignore_environment(tmp_path, monkeypatch):
    monkeypatch.setenv('KANNADA_MAPPING_FILE', str(_write(tmp_path, MINIMAL_DOCUMENT)))
    assert 'PÀ' in load_default_mapping_tables().mapping


def test_missing_file(tmp_path):
    with pytest.raises(MappingConfigurationError) as exc_info:
        load_mapping_tables(tmp_path / "missing.json")
    assert isinstance(exc_info.value.__cause__, OSError)


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text('{"mapping": {', encoding='utf-8')

    with pytest.raises(MappingConfigurationError) as exc_info:
        load_mapping_tables(path)
    assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)


def test_missing_sections(tmp_path):
    document = dict(MINIMAL_DOCUMENT)
    del document['brokenCases']
    del document['ignoreList']

    with pytest.raises(MappingConfigurationError, match="brokenCases, ignoreList"):
        load_mapping_tables(_write(tmp_path, document))


def test_document_must_be_object():
    with pytest.raises(MappingConfigurationError):
        parse_mapping_document(["mapping"])


def test_numbers_mapping_must_be_object():
    document = dict(MINIMAL_DOCUMENT, numbersMapping=["1"])
    with pytest.raises(MappingConfigurationError):
        parse_mapping_document(document, kannada_digits=True)
