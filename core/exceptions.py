"""
Digital Twin Exceptions

Small exception hierarchy shared by the loaders, the engine and the API.
Initialization errors are fatal to startup; everything raised during a
tick or a query is caught at that boundary instead.
"""


class TwinError(Exception):
    """Base exception for the digital twin."""

    pass


class ConfigurationError(TwinError):
    """A configuration value is missing or invalid."""

    pass


class InitializationError(TwinError):
    """The twin could not be brought to a runnable state."""

    pass


class ModelLoadError(InitializationError):
    """The building model file is missing or malformed."""

    pass


class DatasetError(InitializationError):
    """The telemetry dataset is missing, empty or malformed."""

    pass
