"""Exceptions raised by the locale cache, translation and record services."""


class ServiceError(Exception):
    pass


class ConfigError(ServiceError):
    pass


class NotFound(ServiceError):
    pass


class RecordNotFound(NotFound):
    pass


class ResourceFileNotFound(NotFound):
    pass


class LocalesNotFound(NotFound):
    pass


class InvalidInput(ServiceError):
    pass


class DuplicateKey(InvalidInput):
    pass


class StorageError(ServiceError):
    """A write to the locale tree failed; earlier writes in the same call are kept."""


class ProviderError(ServiceError):
    """Raised when the translation provider call fails or is misconfigured."""


class ProviderNotConfigured(ProviderError):
    pass


class ProviderResponseError(ProviderError):
    """The provider answered, but not with the structured payload we asked for."""
