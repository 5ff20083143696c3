"""
Application Exceptions

Every error the tracker raises derives from GuildTrackerError. Keyword
context passed to an error becomes both an attribute and an entry of
``details``, which to_dict() exposes to HTTP responses and logs.
"""

from typing import Optional, Dict, Any


class GuildTrackerError(Exception):
    """Root of the tracker's exception hierarchy."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
        **context: Any
    ):
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception
        self.details = dict(details or {})
        for key, value in context.items():
            setattr(self, key, value)
            self.details[key] = value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details
        }


class RemoteSourceError(GuildTrackerError):
    """Talking to the remote roster source went wrong."""

    def __init__(self, message: str, endpoint: Optional[str] = None, **kwargs: Any):
        super().__init__(message, endpoint=endpoint, **kwargs)


class RemoteFetchError(RemoteSourceError):
    """Network failure, non-2xx response or undecodable payload."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs: Any):
        super().__init__(message, status_code=status_code, **kwargs)


class RemoteTimeoutError(RemoteSourceError):
    """The remote call outlived its deadline."""

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            f"{endpoint} gave no answer within {timeout}s",
            endpoint=endpoint,
            timeout=timeout,
            original_exception=original_exception
        )


class PersistenceContentionError(GuildTrackerError):
    """The store rejected a write because of a concurrent transaction."""

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs: Any):
        super().__init__(message, operation=operation, **kwargs)


class ReconciliationError(GuildTrackerError):
    """A reconciliation step could not be committed."""

    def __init__(
        self,
        message: str,
        batch_index: Optional[int] = None,
        attempts: Optional[int] = None,
        **kwargs: Any
    ):
        super().__init__(message, batch_index=batch_index, attempts=attempts, **kwargs)


class ValidationError(GuildTrackerError):
    """Caller input was rejected."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, **kwargs: Any):
        super().__init__(message, field=field, value=value, **kwargs)


class DuplicateCharacterError(ValidationError):
    def __init__(self, name: str):
        super().__init__(f"{name} is already tracked", field="name", value=name)


class NotFoundError(GuildTrackerError):
    """No member, character or message by that name."""

    def __init__(self, resource: str, identifier: Any, **kwargs: Any):
        super().__init__(
            f"No {resource.lower()} named {identifier}",
            resource=resource,
            identifier=str(identifier),
            **kwargs
        )


class ConfigurationError(GuildTrackerError):
    """Settings could not be loaded or failed validation."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs: Any):
        super().__init__(message, config_key=config_key, **kwargs)
