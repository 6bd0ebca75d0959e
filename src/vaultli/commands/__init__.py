"""Built-in CLI commands for vaultli.

* :mod:`~vaultli.commands.secrets` -- ``read``, ``write``, ``list``,
  ``delete`` and ``unwrap``, registered directly on the root app.
* :mod:`~vaultli.commands.config` -- the ``config`` sub-command group for
  viewing and changing the persisted client configuration.
"""
