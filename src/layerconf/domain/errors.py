"""Domain-specific exceptions for typed error handling at boundaries."""

from __future__ import annotations


class ConfigError(Exception):
    """Base class for every error raised by the configuration engine.

    Example:
        >>> from layerconf.domain.errors import ConfigError
        >>> str(ConfigError("boom"))
        'boom'
    """


class NotDefinedError(ConfigError, KeyError):
    """A read targeted a configuration path that does not exist.

    Always surfaced to the caller of ``get``; configuration is static, so a
    retry cannot change the outcome. Inherits from KeyError so mapping-style
    callers can keep their ``except KeyError`` handlers.

    Example:
        >>> err = NotDefinedError("db.missing")
        >>> err.path
        'db.missing'
        >>> str(err)
        'Configuration property "db.missing" is not defined'
        >>> isinstance(err, KeyError)
        True
    """

    def __init__(self, path: str) -> None:
        super().__init__(path)
        self.path = path

    def __str__(self) -> str:
        return f'Configuration property "{self.path}" is not defined'


class MalformedSourceError(ConfigError):
    """A configuration source exists but its content could not be parsed.

    Example:
        >>> err = MalformedSourceError("config/default.json", "Expecting value")
        >>> err.source
        'config/default.json'
        >>> str(err)
        "Cannot parse config file: 'config/default.json': Expecting value"
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Cannot parse config file: '{source}': {reason}")
        self.source = source
        self.reason = reason


class SourceReadError(ConfigError):
    """A configuration file exists but could not be read from disk.

    Example:
        >>> str(SourceReadError("config/default.json"))
        'Config file config/default.json cannot be read'
    """

    def __init__(self, source: str) -> None:
        super().__init__(f"Config file {source} cannot be read")
        self.source = source


class RecursionLimitExceededError(ConfigError):
    """Change notification for a path kept re-triggering itself.

    Returned (not raised) by :meth:`layerconf.domain.watch.WatchRegistry.notify`
    once the bounded dispatch loop gives up.

    Example:
        >>> err = RecursionLimitExceededError("db.port", 20)
        >>> str(err)
        'Recursion detected while setting [db.port] (more than 20 iterations)'
    """

    def __init__(self, path: str, limit: int) -> None:
        super().__init__(f"Recursion detected while setting [{path}] (more than {limit} iterations)")
        self.path = path
        self.limit = limit


class StrictnessViolationError(ConfigError):
    """An environment or instance discriminator is unmatched or ambiguous.

    Only raised in strict mode; otherwise the violation is logged.

    Example:
        >>> str(StrictnessViolationError("environment value of 'qa' did not match any deployment config file names"))
        "environment value of 'qa' did not match any deployment config file names"
    """


class ImmutableConfigError(ConfigError, TypeError):
    """A frozen configuration entry or sealed node was written to.

    Inherits from TypeError, mirroring the error Python raises when
    assigning into an immutable mapping proxy.

    Example:
        >>> err = ImmutableConfigError("port")
        >>> err.key
        'port'
        >>> isinstance(err, TypeError)
        True
    """

    def __init__(self, key: object, message: str | None = None) -> None:
        super().__init__(message or f"Cannot modify immutable configuration property {key!r}")
        self.key = key


__all__ = [
    "ConfigError",
    "ImmutableConfigError",
    "MalformedSourceError",
    "NotDefinedError",
    "RecursionLimitExceededError",
    "SourceReadError",
    "StrictnessViolationError",
]
