"""Core exception classes for the Industry Mapper application."""


class IndustryMapperError(Exception):
    """Base exception for reference data operations."""

    pass


class DataSourceError(IndustryMapperError):
    """Raised when a CSV dataset cannot be fetched."""

    pass


class DataParseError(IndustryMapperError):
    """Raised when a CSV dataset cannot be parsed."""

    pass


class InitializationTimeoutError(IndustryMapperError):
    """Raised when loading reference data exceeds its deadline."""

    pass


class DataValidationError(IndustryMapperError):
    """Raised when caller-supplied data fails validation."""

    pass
