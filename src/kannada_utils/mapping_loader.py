#!/usr/bin/env python3
"""
Mapping table loader.

Reads the persisted JSON table file into an immutable MappingTables.

Configuration (environment, usually from a .env file):
- KANNADA_MAPPING_FILE: path to an alternative mapping JSON
  (default: the bundled data/nudi_baraha_mapping.json)
- KANNADA_DIGITS: 'true' to convert ASCII digits to Kannada digits
  (default: 'false', digits pass through)

Explicit arguments always win over the environment.
"""

import json
import logging
import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import MappingConfigurationError
from .kannada_mapping_tables import MappingTables, build_mapping_tables

logger = logging.getLogger(__name__)

DEFAULT_MAPPING_RESOURCE = 'nudi_baraha_mapping.json'

REQUIRED_SECTIONS = (
    'mapping',
    'brokenCases',
    'dependentVowels',
    'vattaksharagalu',
    'asciiArkavattu',
    'ignoreList',
)


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def _read_mapping_source(mapping_file: Optional[Union[str, Path]]) -> str:
    if mapping_file is None:
        resource = resources.files(__package__) / 'data' / DEFAULT_MAPPING_RESOURCE
        logger.debug(f"Loading bundled mapping tables: {DEFAULT_MAPPING_RESOURCE}")
        return resource.read_text(encoding='utf-8')

    path = Path(mapping_file)
    logger.info(f"Loading mapping tables from {path}")
    try:
        return path.read_text(encoding='utf-8')
    except OSError as e:
        raise MappingConfigurationError(f"Cannot read mapping file {path}: {e}") from e


def parse_mapping_document(document: Dict[str, Any], kannada_digits: bool = False) -> MappingTables:
    """
    Build a MappingTables from an already-decoded JSON document.

    Args:
        document: Decoded JSON object with the table sections
        kannada_digits: Merge the optional numbersMapping section into mapping

    Raises:
        MappingConfigurationError: If a required section is missing or malformed
    """
    if not isinstance(document, dict):
        raise MappingConfigurationError("Mapping file must contain a JSON object")

    missing = [section for section in REQUIRED_SECTIONS if section not in document]
    if missing:
        raise MappingConfigurationError(f"Mapping file is missing sections: {', '.join(missing)}")

    mapping = document['mapping']
    if kannada_digits:
        numbers = document.get('numbersMapping') or {}
        if not isinstance(numbers, dict):
            raise MappingConfigurationError("Section 'numbersMapping' must be an object")
        if isinstance(mapping, dict):
            mapping = {**mapping, **numbers}
        logger.debug(f"Kannada digits enabled: merged {len(numbers)} digit entries")

    return build_mapping_tables(
        mapping=mapping,
        broken_cases=document['brokenCases'],
        vattaksharagalu=document['vattaksharagalu'],
        ascii_arkavattu=document['asciiArkavattu'],
        dependent_vowels=document['dependentVowels'],
        ignore_list=document['ignoreList'],
    )


def load_mapping_tables(mapping_file: Optional[Union[str, Path]] = None,
                        kannada_digits: Optional[bool] = None) -> MappingTables:
    """
    Load and validate a table set.

    Args:
        mapping_file: JSON file to load (default: KANNADA_MAPPING_FILE or the bundled file)
        kannada_digits: Convert ASCII digits (default: KANNADA_DIGITS or False)

    Returns:
        Immutable MappingTables

    Raises:
        MappingConfigurationError: If the file is missing, not valid JSON or malformed
    """
    if mapping_file is None:
        mapping_file = os.getenv('KANNADA_MAPPING_FILE') or None
    if kannada_digits is None:
        kannada_digits = _env_flag('KANNADA_DIGITS')

    return _load_tables(mapping_file, kannada_digits)


def _load_tables(mapping_file: Optional[Union[str, Path]], kannada_digits: bool) -> MappingTables:
    source = _read_mapping_source(mapping_file)
    try:
        document = json.loads(source)
    except json.JSONDecodeError as e:
        raise MappingConfigurationError(
            f"Mapping file {mapping_file or DEFAULT_MAPPING_RESOURCE} is not valid JSON: {e}"
        ) from e

    tables = parse_mapping_document(document, kannada_digits=kannada_digits)
    logger.info(f"Loaded {len(tables.mapping)} mapping entries "
                f"from {mapping_file or DEFAULT_MAPPING_RESOURCE}")
    return tables


@lru_cache(maxsize=1)
def load_default_mapping_tables() -> MappingTables:
    """Bundled Nudi/Baraha tables with digits passed through, loaded once."""
    return _load_tables(None, kannada_digits=False)
