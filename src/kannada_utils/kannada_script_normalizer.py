#!/usr/bin/env python3
"""
Kannada Script Normalizer
=========================

Post-processing passes applied to the output of the legacy → Unicode engine.
Each pass is a total rewrite over the whole string. They run in order, and
the sequence repeats until the text no longer changes:

1. Halant collapse        ್್ → ್
2. Vowel-run collapse     three or more identical vowel signs → one
3. Trailing halant        ್ + vowel sign at a word boundary → vowel sign
4. Repha repositioning    consonant (+ vowel sign) + dangling ರ್ → ರ್ + consonant (+ vowel sign)
5. Canonical composition  NFC
"""

import re
import unicodedata

from .kannada_mapping_tables import HALANT

RA_HALANT = 'ರ್'

# ============================================================================
# COMPILED PATTERNS
# ============================================================================

DUPLICATE_HALANT_PATTERN = re.compile(r'್{2,}')

# Two identical signs in a row are ambiguous in the source fonts and left alone
DUPLICATE_VOWEL_PATTERN = re.compile(r'([ಾ-ೌ])\1{2,}')

TRAILING_HALANT_PATTERN = re.compile(r'್([ಾ-ೌ])(?=[\s.,!?;:]|$)')

# A ರ್ already followed by a consonant (or a ZWJ) is in logical order; only the
# dangling one drawn after its consonant is moved.
REPHA_PATTERN = re.compile(
    r'([ಕ-ಹ])'
    r'([ಾ-ೃೆ-ೈೊ-ೌ])?'
    r'ರ್'
    r'(?![ಕ-ಹ\u200D])'
)


# ============================================================================
# PASSES
# ============================================================================

def collapse_halants(text: str) -> str:
    return DUPLICATE_HALANT_PATTERN.sub(HALANT, text)


def collapse_vowel_runs(text: str) -> str:
    return DUPLICATE_VOWEL_PATTERN.sub(r'\1', text)


def drop_trailing_halants(text: str) -> str:
    """Repair an incomplete cluster at a word boundary by dropping the halant."""
    return TRAILING_HALANT_PATTERN.sub(r'\1', text)


def reposition_repha(text: str) -> str:
    """
    Move a ರ್ drawn after its consonant to the front of that consonant.

    Examples:
        >>> reposition_repha('ಕರ್')
        'ರ್ಕ'
        >>> reposition_repha('ಕಾರ್ ')
        'ರ್ಕಾ '
    """
    return REPHA_PATTERN.sub(lambda m: RA_HALANT + m.group(1) + (m.group(2) or ''), text)


def _run_passes(text: str) -> str:
    text = unicodedata.normalize('NFC', text)
    text = collapse_halants(text)
    text = collapse_vowel_runs(text)
    text = drop_trailing_halants(text)
    text = reposition_repha(text)
    return unicodedata.normalize('NFC', text)


def normalize_script(text: str) -> str:
    """
    Run every normalization pass over text until it stops changing.

    A later pass can recreate a pattern an earlier one removed (dropping a
    halant can join vowel signs into a new run), so the passes repeat until
    the text is stable. Every round either shortens the text or moves a
    dangling ರ್ in front of a consonant, where it is never matched again.

    Args:
        text: Raw Unicode output of the legacy → Unicode engine

    Returns:
        Normalized NFC text
    """
    if not text:
        return text

    normalized = _run_passes(text)
    while normalized != text:
        text, normalized = normalized, _run_passes(normalized)
    return normalized
