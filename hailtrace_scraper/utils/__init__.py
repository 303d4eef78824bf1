"""Utility modules."""

from .http_client import HailTraceAPI
from .url_utils import URLUtils

__all__ = ['HailTraceAPI', 'URLUtils']
