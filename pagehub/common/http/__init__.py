"""Outbound HTTP package.

Public re-exports so callers can write::

    from pagehub.common.http import HttpService
"""

from pagehub.common.http.client import HttpClientConfig, HttpService

__all__ = ["HttpClientConfig", "HttpService"]
