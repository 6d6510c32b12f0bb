class EcsExporterError(Exception):
    """Base exception for the ECS exporter."""

    pass


class ConfigurationError(EcsExporterError):
    """Raised when the exporter configuration is invalid."""

    pass
