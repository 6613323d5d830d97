# kiwisdk/types.py
"""Core type definitions shared across kiwisdk.

This module defines the request container handed to the transport and the
type aliases used by the filter builder and construction-time options.
"""

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from .client import KiwiClient


class RequestData(BaseModel):
    """Encapsulates data for a single HTTP request attempt."""

    method: str
    url: str
    params: Mapping[str, Any] | None = None
    json_data: Any | None = None
    headers: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")

    def build_request(
        self, client: httpx.AsyncClient | None = None
    ) -> httpx.Request:
        """Builds an httpx.Request object from the stored data.

        When a client is given, its default headers and timeout are applied.
        """
        if client is not None:
            return client.build_request(
                method=self.method,
                url=self.url,
                params=self.params,
                json=self.json_data,
                headers=self.headers,
            )
        return httpx.Request(
            method=self.method,
            url=self.url,
            params=self.params,
            json=self.json_data,
            headers=self.headers,
        )


FilterValue = str | int | float | bool | None
"""A value that can be substituted into a filter template."""

FilterParams = Mapping[str, FilterValue]
"""Placeholder name -> value, used by :class:`kiwisdk.filter.Filter`.

Keys are the bare names, i.e. ``{"id": 1}`` fills ``{:id}``.
"""

ClientOption = Callable[["KiwiClient"], None]
"""A construction-time option applied by ``KiwiClient.__init__``.

Options run in the order given; an option that installs an auth strategy
replaces any strategy installed before it.
"""
