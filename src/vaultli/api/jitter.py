"""Randomized pre-request delay.

When many clients start at once (a fleet restart, a cron tick) they all hit
the server in the same instant. A jitter delay spreads those requests out.
The delay is ``constant`` milliseconds plus ``multiplier`` times a random
integer drawn from ``[0, size)``; a ``size`` of zero or less turns jitter off.

All three knobs are looked up per call first, then on the client config.
"""

from __future__ import annotations

import random
import time
from typing import Optional

from pydantic import BaseModel

from vaultli.config import resolve_option
from vaultli.output import get_output


class JitterPolicy:
    """Computes and applies the jitter delay for a call.

    Args:
        defaults: Client-wide configuration consulted when a call does not
            set ``jitter_size``, ``jitter_multiplier`` or ``jitter_constant``.
    """

    def __init__(self, defaults: Optional[BaseModel] = None) -> None:
        self._defaults = defaults

    def jitter_size(self, options: Optional[BaseModel] = None) -> int:
        """Upper bound (exclusive) of the random draw; never negative."""
        value = resolve_option("jitter_size", options, self._defaults)
        return max(int(value or 0), 0)

    def jitter_multiplier(self, options: Optional[BaseModel] = None) -> float:
        """Milliseconds added per unit of the random draw."""
        return float(resolve_option("jitter_multiplier", options, self._defaults) or 0)

    def jitter_constant(self, options: Optional[BaseModel] = None) -> float:
        """Fixed milliseconds added to every delay."""
        return float(resolve_option("jitter_constant", options, self._defaults) or 0)

    def enabled(self, options: Optional[BaseModel] = None) -> bool:
        return self.jitter_size(options) > 0

    def compute_delay(self, options: Optional[BaseModel] = None) -> float:
        """Return the delay in seconds, or ``0`` when jitter is disabled."""
        size = self.jitter_size(options)
        if size <= 0:
            return 0
        draw = random.randrange(size)
        millis = self.jitter_constant(options) + self.jitter_multiplier(options) * draw
        return millis / 1000.0

    def maybe_delay(self, options: Optional[BaseModel] = None) -> None:
        """Block the calling thread for the computed delay, if positive."""
        if not self.enabled(options):
            return
        delay = self.compute_delay(options)
        if delay > 0:
            get_output().debug(f"Jitter: sleeping {delay:.3f}s")
            time.sleep(delay)
