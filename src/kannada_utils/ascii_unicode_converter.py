#!/usr/bin/env python3
"""
Kannada ASCII ↔ Unicode Converter
=================================

Converts text typed in the legacy Nudi/Baraha "ASCII" fonts to Unicode
Kannada and back.

Legacy → Unicode:
1. A halant glyph followed by one space or tab is joined to the next letter
2. Split on single spaces; each word is converted on its own
3. Greedy longest match against the legacy table (ZWJ after a halant)
4. Special cases for unmatched characters:
   arkavattu (Ra compound), vattakshara (geminate), broken vowel signs
5. Script normalization (see kannada_script_normalizer)

Unicode → Legacy:
1. NFC, then strip ZWJ/ZWNJ
2. Greedy longest match against the reverse table

The legacy fonts store glyphs in drawing order, so later input can rewrite
letters that were already emitted. Each word keeps its output in a plain list
that the special-case rules index into and overwrite.
"""

import logging
import re
import time
import unicodedata
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Mapping, Optional, Union

from .errors import InvalidArgumentError, MappingConfigurationError
from .kannada_mapping_tables import HALANT, ZWJ, ZWNJ, LengthBucketedIndex, MappingTables
from .kannada_script_normalizer import normalize_script

logger = logging.getLogger(__name__)


class KannadaAsciiFormat(Enum):
    """Encoding of the text handed to KannadaConverter.convert()."""
    DEFAULT = 0  # returned unchanged
    NUDI = 1
    BARAHA = 2

    @classmethod
    def parse(cls, value: Union['KannadaAsciiFormat', str]) -> 'KannadaAsciiFormat':
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        raise InvalidArgumentError(f"Unknown Kannada ASCII format: {value!r}")


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass
class ConversionStatistics:
    """Counters collected while converting one text."""
    total_words: int = 0
    rules_applied: Counter = field(default_factory=Counter)
    processing_time: float = 0.0


@dataclass
class ConvertedText:
    """Complete result of a reported conversion."""
    original_text: str
    converted_text: str
    direction: str  # 'ascii_to_unicode' or 'unicode_to_ascii'
    statistics: ConversionStatistics
    timestamp: datetime


def _require_text(text, name: str = 'text') -> None:
    if text is None:
        raise InvalidArgumentError(f"{name} must not be None")
    if not isinstance(text, str):
        raise InvalidArgumentError(f"{name} must be a str, got {type(text).__name__}")


# ============================================================================
# CONVERTER
# ============================================================================

class KannadaConverter:
    """
    Bidirectional Nudi/Baraha ↔ Unicode converter over one shared table set.

    The converter holds no per-call state; a single instance can serve
    concurrent callers.
    """

    def __init__(self,
                 tables: MappingTables,
                 ascii_overrides: Optional[Mapping[str, str]] = None,
                 unicode_overrides: Optional[Mapping[str, str]] = None,
                 join_split_halants: bool = True):
        """
        Initialize the converter.

        Args:
            tables: Validated table set (see mapping_loader.load_mapping_tables)
            ascii_overrides: Extra legacy → Unicode entries, winning on collision
            unicode_overrides: Extra Unicode → legacy entries, winning on collision
            join_split_halants: Rejoin a halant glyph to the letter after it when a
                                single space or tab separates them
        """
        if not isinstance(tables, MappingTables):
            raise MappingConfigurationError(
                f"KannadaConverter needs a MappingTables instance, got {type(tables).__name__}"
            )
        self.tables = tables.with_overrides(ascii_overrides, unicode_overrides)
        self._split_halant_pattern = _split_halant_pattern(self.tables) if join_split_halants else None

    # -------------------- Public API --------------------

    def ascii_to_unicode(self, ascii_text: str) -> str:
        """
        Convert legacy Nudi/Baraha text to Unicode Kannada.

        Raises:
            InvalidArgumentError: If ascii_text is None or not a str
        """
        _require_text(ascii_text, 'ascii_text')
        if not ascii_text:
            return ''
        return self._ascii_to_unicode(ascii_text)

    def unicode_to_ascii(self, unicode_text: str) -> str:
        """
        Convert Unicode Kannada to legacy Nudi/Baraha text.

        Raises:
            InvalidArgumentError: If unicode_text is None or not a str
        """
        _require_text(unicode_text, 'unicode_text')
        if not unicode_text:
            return ''
        return self._unicode_to_ascii(unicode_text)

    def convert(self, text: str, ascii_format: Union[KannadaAsciiFormat, str]) -> str:
        """
        Route text by its legacy format.

        NUDI and BARAHA share one table and go through ascii_to_unicode();
        DEFAULT returns text unchanged.
        """
        _require_text(text)
        ascii_format = KannadaAsciiFormat.parse(ascii_format)

        if ascii_format in (KannadaAsciiFormat.NUDI, KannadaAsciiFormat.BARAHA):
            return self.ascii_to_unicode(text)
        return text

    def convert_with_report(self, text: str, to_unicode: bool = True) -> ConvertedText:
        """
        Convert text and collect per-rule statistics.

        Args:
            text: Input text
            to_unicode: True for legacy → Unicode, False for Unicode → legacy

        Returns:
            ConvertedText with the output and statistics
        """
        _require_text(text)
        start_time = time.time()
        stats = ConversionStatistics()

        if not text:
            converted = ''
        elif to_unicode:
            converted = self._ascii_to_unicode(text, stats)
        else:
            converted = self._unicode_to_ascii(text, stats)

        stats.processing_time = time.time() - start_time
        direction = 'ascii_to_unicode' if to_unicode else 'unicode_to_ascii'
        logger.debug(f"{direction}: {stats.total_words} words in {stats.processing_time*1000:.2f}ms")

        return ConvertedText(
            original_text=text,
            converted_text=converted,
            direction=direction,
            statistics=stats,
            timestamp=datetime.now()
        )

    # -------------------- Legacy → Unicode --------------------

    def _ascii_to_unicode(self, text: str, stats: Optional[ConversionStatistics] = None) -> str:
        rules = stats.rules_applied if stats is not None else None

        if self._split_halant_pattern is not None:
            text, joined = self._split_halant_pattern.subn(r'\1', text)
            if joined:
                _count(rules, 'halant_joined', joined)

        words = text.split(' ')
        if stats is not None:
            stats.total_words = sum(1 for word in words if word)

        raw = ' '.join(self._convert_word(word, rules) for word in words)
        return normalize_script(raw)

    def _convert_word(self, word: str, rules: Optional[Counter]) -> str:
        tables = self.tables
        letters: List[str] = []
        i = 0

        while i < len(word):
            if word[i] in tables.ignore_list:
                _count(rules, 'ignored')
                i += 1
                continue

            match = tables.ascii_index.longest_match(word, i)
            if match is not None:
                mapped, length = match
                # Keep an explicit half form when the previous letter is dead
                if letters and letters[-1].endswith(HALANT):
                    letters.append(ZWJ)
                    _count(rules, 'zwj')
                letters.append(mapped)
                _count(rules, 'direct')
                i += length
                continue

            letters = self._resolve_unmatched(letters, word[i], rules)
            i += 1

        return ''.join(letters)

    def _resolve_unmatched(self, letters: List[str], char: str, rules: Optional[Counter]) -> List[str]:
        tables = self.tables

        if char in tables.ascii_arkavattu:
            _count(rules, 'arkavattu')
            return self._apply_arkavattu(_split_letters(letters), tables.ascii_arkavattu[char])

        if char in tables.vattaksharagalu:
            _count(rules, 'vattakshara')
            return self._apply_vattakshara(_split_letters(letters), tables.vattaksharagalu[char])

        if char in tables.broken_cases:
            return self._apply_broken_case(_split_letters(letters), char, rules)

        _count(rules, 'passthrough')
        letters.append(char)
        return letters

    def _apply_arkavattu(self, letters: List[str], ra_form: str) -> List[str]:
        """
        Ra compound: X → ರ ್ X, X + vowel → ರ ್ X + vowel.

        The trigger is drawn after the consonant it logically follows, so the
        consonant (and its vowel sign) move behind the Ra + halant.
        """
        last = letters[-1] if letters else ''

        if last in self.tables.dependent_vowels and len(letters) >= 2:
            second_last = letters[-2]
            letters[-2] = ra_form
            letters[-1] = HALANT
            letters.append(second_last)
            letters.append(last)
        elif letters:
            letters[-1] = ra_form
            letters.append(HALANT)
            letters.append(last)
        else:
            letters.extend([ra_form, HALANT])

        return letters

    def _apply_vattakshara(self, letters: List[str], consonant: str) -> List[str]:
        """Geminate: X → X ್ C, X + vowel → X ್ C + vowel."""
        last = letters[-1] if letters else ''

        if last in self.tables.dependent_vowels:
            letters[-1] = HALANT
            letters.append(consonant)
            letters.append(last)
        else:
            letters.append(HALANT)
            letters.append(consonant)

        return letters

    def _apply_broken_case(self, letters: List[str], char: str, rules: Optional[Counter]) -> List[str]:
        broken_case = self.tables.broken_cases[char]
        last = letters[-1] if letters else None

        if last is not None and last in broken_case.mapping:
            letters[-1] = broken_case.mapping[last]
            _count(rules, 'broken_case')
        elif broken_case.value:
            letters.append(broken_case.value)
            _count(rules, 'broken_case')
        else:
            _count(rules, 'broken_case_dropped')

        return letters

    # -------------------- Unicode → Legacy --------------------

    def _unicode_to_ascii(self, text: str, stats: Optional[ConversionStatistics] = None) -> str:
        rules = stats.rules_applied if stats is not None else None
        if stats is not None:
            stats.total_words = len(text.split())

        text = unicodedata.normalize('NFC', text)
        text = text.replace(ZWJ, '').replace(ZWNJ, '')
        return _replace_using_index(text, self.tables.unicode_index, rules)


# ============================================================================
# HELPERS
# ============================================================================

def _count(rules: Optional[Counter], rule: str, times: int = 1) -> None:
    if rules is not None:
        rules[rule] += times


def _split_halant_pattern(tables: MappingTables) -> Optional[re.Pattern]:
    """
    Pattern for a halant glyph followed by one space or tab.

    Legacy documents often carry a space after the halant glyph; the halant
    belongs to the next letter, so the separator is dropped before scanning.
    """
    halant_keys = sorted((key for key, value in tables.mapping.items() if value == HALANT),
                         key=len, reverse=True)
    if not halant_keys:
        return None
    return re.compile('(' + '|'.join(re.escape(key) for key in halant_keys) + ')[ \t]')


def _split_letters(letters: List[str]) -> List[str]:
    """Re-split emitted letters into single code points for the context rules."""
    return list(''.join(letters))


def _replace_using_index(text: str, index: LengthBucketedIndex, rules: Optional[Counter]) -> str:
    output: List[str] = []
    i = 0

    while i < len(text):
        match = index.longest_match(text, i)
        if match is not None:
            mapped, length = match
            output.append(mapped)
            _count(rules, 'direct')
            i += length
        else:
            output.append(text[i])
            _count(rules, 'passthrough')
            i += 1

    return ''.join(output)


# ============================================================================
# REPORTING
# ============================================================================

def print_conversion_report(result: ConvertedText, detailed: bool = False):
    """
    Print a summary of a reported conversion.

    Args:
        result: ConvertedText from KannadaConverter.convert_with_report()
        detailed: Also print the input and output text
    """
    stats = result.statistics

    print(f"\n{'='*80}")
    print(f"KANNADA CONVERSION REPORT ({result.direction})")
    print(f"{'='*80}")
    print(f"Timestamp: {result.timestamp.strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"Processing Time: {stats.processing_time*1000:.2f}ms")

    print(f"\n{'STATISTICS':<30}")
    print(f"{'─'*80}")
    print(f"  {'Input Characters:':<28} {len(result.original_text):>6}")
    print(f"  {'Output Characters:':<28} {len(result.converted_text):>6}")
    print(f"  {'Words:':<28} {stats.total_words:>6}")

    if stats.rules_applied:
        print(f"\n{'Rules Applied:':<30}")
        for rule, count in stats.rules_applied.most_common():
            print(f"  {rule:<28} {count:>6}x")

    if detailed:
        print(f"\n{'INPUT':<30}")
        print(f"{'─'*80}")
        print(result.original_text)
        print(f"\n{'OUTPUT':<30}")
        print(f"{'─'*80}")
        print(result.converted_text)

    print(f"\n{'='*80}\n")
