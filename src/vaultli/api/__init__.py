"""Secret operations and the pieces of the request pipeline.

* :mod:`~vaultli.api.paths` -- prefix joining and separator collapsing.
* :mod:`~vaultli.api.jitter` -- randomized pre-request delay.
* :mod:`~vaultli.api.logical` -- list/read/write/delete/unwrap, composing
  the two above with :class:`~vaultli.cache.ResponseCache` around a
  :class:`~vaultli.client.transport.Transport` call.
"""

from vaultli.api.jitter import JitterPolicy
from vaultli.api.logical import Logical
from vaultli.api.paths import PathResolver, resolve_path

__all__ = ["JitterPolicy", "Logical", "PathResolver", "resolve_path"]
