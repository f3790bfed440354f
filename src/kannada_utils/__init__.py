#!/usr/bin/env python3
"""
Kannada ASCII ↔ Unicode Converter
=================================

Converts Kannada text typed in the legacy Nudi/Baraha fonts to Unicode and back.

Main Components:
- ascii_unicode_converter: Forward and reverse engines, format routing, reports
- kannada_mapping_tables: Immutable table set and length-bucketed index
- kannada_script_normalizer: Post-processing passes on Unicode output
- mapping_loader: JSON table loading (bundled file, KANNADA_MAPPING_FILE)

Quick Start:
-----------
Using the bundled tables:
    >>> from kannada_utils import ascii_to_unicode, unicode_to_ascii
    >>> ascii_to_unicode('PÀ£ÀßqÀ')
    'ಕನ್ನಡ'
    >>> unicode_to_ascii('ಕೆ')
    'PÉ'

With your own tables or overrides:
    >>> from kannada_utils import KannadaConverter, load_mapping_tables
    >>> converter = KannadaConverter(load_mapping_tables('my_mapping.json'),
    ...                              ascii_overrides={'~': 'ೞ'})
    >>> result = converter.convert_with_report(text)
    >>> print_conversion_report(result)
"""

from functools import lru_cache

from .ascii_unicode_converter import (
    # Converter
    KannadaConverter,
    KannadaAsciiFormat,

    # Reporting
    print_conversion_report,

    # Data structures
    ConvertedText,
    ConversionStatistics,
)

from .kannada_mapping_tables import (
    MappingTables,
    BrokenCase,
    LengthBucketedIndex,
    build_mapping_tables,
    create_reverse_mapping,
    HALANT,
    ZWJ,
    ZWNJ,
)

from .kannada_script_normalizer import normalize_script

from .mapping_loader import (
    load_mapping_tables,
    load_default_mapping_tables,
)

from .errors import (
    ConversionError,
    InvalidArgumentError,
    MappingConfigurationError,
)

# Version information
__version__ = '1.0.0'


# =============================================================================
# Convenience functions over the bundled tables
# =============================================================================

@lru_cache(maxsize=1)
def default_converter() -> KannadaConverter:
    """Shared converter over load_default_mapping_tables()."""
    return KannadaConverter(load_default_mapping_tables())


def ascii_to_unicode(ascii_text: str) -> str:
    """Convert legacy Nudi/Baraha text to Unicode with the bundled tables."""
    return default_converter().ascii_to_unicode(ascii_text)


def unicode_to_ascii(unicode_text: str) -> str:
    """Convert Unicode Kannada to legacy Nudi/Baraha text with the bundled tables."""
    return default_converter().unicode_to_ascii(unicode_text)


def convert(text: str, ascii_format) -> str:
    """Route text by KannadaAsciiFormat using the bundled tables."""
    return default_converter().convert(text, ascii_format)


__all__ = [
    # Main functions
    'ascii_to_unicode',
    'unicode_to_ascii',
    'convert',
    'default_converter',

    # Converter
    'KannadaConverter',
    'KannadaAsciiFormat',
    'print_conversion_report',

    # Tables
    'MappingTables',
    'BrokenCase',
    'LengthBucketedIndex',
    'build_mapping_tables',
    'create_reverse_mapping',
    'load_mapping_tables',
    'load_default_mapping_tables',
    'normalize_script',

    # Data structures
    'ConvertedText',
    'ConversionStatistics',

    # Constants
    'HALANT',
    'ZWJ',
    'ZWNJ',

    # Errors
    'ConversionError',
    'InvalidArgumentError',
    'MappingConfigurationError',
]
