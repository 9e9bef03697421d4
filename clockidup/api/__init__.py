"""Clockify API access for clockidup."""

from .client import ClockifyClient, ApiKeyAdapter
from ..errors import ClockidupError, ClockifyError, UnexpectedResponseError, is_status

__all__ = ['ClockifyClient', 'ApiKeyAdapter', 'ClockidupError', 'ClockifyError', 'UnexpectedResponseError', 'is_status']
