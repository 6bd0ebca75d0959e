"""Canonical secret paths.

:func:`resolve_path` joins an optional ``path_prefix`` onto a caller's path
and collapses runs of ``/``. Percent-encoding is left to the transport.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel

from vaultli.config import resolve_option

_SEPARATOR_RUN = re.compile(r"/+")


def resolve_path(
    path: str,
    options: Optional[BaseModel] = None,
    defaults: Optional[BaseModel] = None,
) -> str:
    """Return the resolved path for *path*.

    The prefix comes from ``options.path_prefix``, falling back to
    ``defaults.path_prefix``. Leading and trailing slashes are kept; only
    runs of consecutive separators are reduced to one.

    Example::

        >>> resolve_path("//app/db", RequestOptions(path_prefix="secret/"))
        'secret/app/db'
    """
    prefix = resolve_option("path_prefix", options, defaults)
    joined = f"{prefix}/{path}" if prefix else path
    return _SEPARATOR_RUN.sub("/", joined)


class PathResolver:
    """Binds :func:`resolve_path` to a set of client-wide defaults."""

    def __init__(self, defaults: Optional[BaseModel] = None) -> None:
        self._defaults = defaults

    def resolve(self, path: str, options: Optional[BaseModel] = None) -> str:
        return resolve_path(path, options, self._defaults)
