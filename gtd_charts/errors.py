class GtdChartsError(Exception):
    """Base class for errors raised by gtd_charts."""


class DataLoadError(GtdChartsError):
    """The incident CSV could not be read or lacks required columns."""


class ConfigError(GtdChartsError):
    """An environment setting has an unusable value."""
