from .api_exceptions import (
    BaseAPIException,
    ValidationError,
    ConfigurationError,
    UpstreamError,
)

__all__ = ['BaseAPIException', 'ValidationError', 'ConfigurationError', 'UpstreamError']
