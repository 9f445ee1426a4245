#!/usr/bin/env python3
"""
Standardized exception hierarchy for the RSS hub.

Provides specific exception types for feed fetching, aggregation and
configuration problems with machine-readable error context.
"""

from typing import Optional, Dict, Any


class RSSHubError(Exception):
    """Base exception for all RSS hub errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            context: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context
        }


# Source-related exceptions
class SourceError(RSSHubError):
    """Base exception for feed source errors."""
    pass


class SourceConnectionError(SourceError):
    """Failed to download a feed document."""

    def __init__(self, source_name: str, url: str, original_error: Exception):
        message = f"Failed to connect to {source_name} at {url}"
        context = {
            'source_name': source_name,
            'url': url,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


class SourceParseError(SourceError):
    """Feed document could not be parsed into entries."""

    def __init__(self, source_name: str, parse_stage: str, original_error: Optional[Exception] = None):
        message = f"Failed to parse {parse_stage} from {source_name}"
        context = {
            'source_name': source_name,
            'parse_stage': parse_stage,
            'original_error': str(original_error) if original_error else None
        }
        super().__init__(message, context=context)


class SourceTimeoutError(SourceError):
    """Feed request timed out."""

    def __init__(self, source_name: str, timeout_seconds: float):
        message = f"Timeout fetching {source_name} after {timeout_seconds}s"
        context = {
            'source_name': source_name,
            'timeout_seconds': timeout_seconds
        }
        super().__init__(message, context=context)


class AggregationError(RSSHubError):
    """A refresh of the combined feed failed outside per-source handling."""

    def __init__(self, stage: str, original_error: Exception):
        message = f"Feed {stage} failed: {original_error}"
        context = {
            'stage': stage,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


class ConfigurationError(RSSHubError):
    """Configuration is invalid or missing."""

    def __init__(self, issues: list):
        message = f"Configuration validation failed: {'; '.join(issues)}"
        super().__init__(message, context={'issues': list(issues)})
