"""
Error taxonomy for the extractors and chart renderers.

Extractor errors are fatal for a run. ChartLoadFailure and EmptyParsedData raised
while rendering are turned into a status page by the renderer.
"""


class HealthChartsError(Exception):
    """Base class for every error raised by healthcharts."""


class MissingSourceFile(HealthChartsError, FileNotFoundError):
    """Raised when a raw input file does not exist."""


class HeaderNotFoundError(HealthChartsError, ValueError):
    """Raised when no row of a sheet looks like the age-group header."""


class InsufficientColumnsError(HealthChartsError, ValueError):
    """Raised when too few age-group columns can be located in the header row."""


class MissingColumnsError(HealthChartsError, ValueError):
    """Raised when a CSV lacks one or more required columns."""


class EmptyParsedData(HealthChartsError, ValueError):
    """Raised when an input parses to nothing usable."""


class SheetNotFoundError(HealthChartsError, LookupError):
    """Raised when strict sheet selection finds no sheet matching the target table."""


class ChartLoadFailure(HealthChartsError, RuntimeError):
    """Raised when a tidy CSV cannot be loaded for rendering."""
