"""
Shared fixtures for the kannada_utils test modules.
"""

import pytest

from kannada_utils import KannadaConverter, build_mapping_tables, load_default_mapping_tables


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """
    Keep developer .env settings out of the tests.

    Setting before deleting makes monkeypatch restore the variables on
    teardown even when a test loads an env file that sets them directly.
    """
    for name in ('KANNADA_MAPPING_FILE', 'KANNADA_DIGITS'):
        monkeypatch.setenv(name, '')
        monkeypatch.delenv(name)


@pytest.fixture
def small_tables():
    """
    Tiny synthetic table set with readable ASCII triggers.

    k n d t y a  consonants/vowel   f = ಾ, e = ೆ, x = ್ suffixes
    N T          geminate triggers  R = arkavattu
    I O          broken vowel signs  # = ignored
    """
    return build_mapping_tables(
        mapping={
            'k': 'ಕ', 'kf': 'ಕಾ', 'ke': 'ಕೆ', 'kx': 'ಕ್',
            'n': 'ನ', 'nx': 'ನ್',
            'd': 'ಡ', 't': 'ತ',
            'y': 'ಯ', 'yf': 'ಯಾ',
            'a': 'ಅ',
            'x': '್',
        },
        broken_cases={
            'I': {'mapping': {'ಿ': 'ೀ', 'ೆ': 'ೇ'}},
            'O': {'value': 'ೂ', 'mapping': {'ೆ': 'ೊ'}},
        },
        vattaksharagalu={'N': 'ನ', 'T': 'ತ'},
        ascii_arkavattu={'R': 'ರ'},
        dependent_vowels=['ಾ', 'ಿ', 'ೀ', 'ು', 'ೂ', 'ೆ', 'ೇ', 'ೈ', 'ೊ', 'ೋ', 'ೌ'],
        ignore_list=['#'],
    )


@pytest.fixture
def small_converter(small_tables):
    return KannadaConverter(small_tables)


@pytest.fixture
def default_tables():
    return load_default_mapping_tables()


@pytest.fixture
def converter(default_tables):
    return KannadaConverter(default_tables)
