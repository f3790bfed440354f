"""
Exceptions raised by the Kannada ASCII/Unicode converter.
"""


class ConversionError(Exception):
    """Base exception for kannada_utils errors"""
    pass


class InvalidArgumentError(ConversionError, ValueError):
    """Raised when a conversion entry point receives None or a non-string"""
    pass


class MappingConfigurationError(ConversionError, ValueError):
    """Raised when a mapping table is missing or malformed at construction time"""
    pass
