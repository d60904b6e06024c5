from django.core.exceptions import ImproperlyConfigured


class ConfigurationError(ImproperlyConfigured):
    """A collection was registered with missing or unusable options."""


class InvalidRequestError(ValueError):
    """A request parameter could not be parsed."""


class UnknownCollectionError(LookupError):
    pass
