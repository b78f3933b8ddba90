from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapabilityProbe:
    name: str
    available: bool
    reason: str


def probe_capability(name: str, check: Callable[[], bool]) -> CapabilityProbe:
    """Run ``check`` once and return its outcome as a value.

    Nothing is cached here; callers keep the result and pass it on to
    whatever needs it.
    """
    try:
        available = bool(check())
    except Exception as exc:
        logger.warning("capability probe %s failed, treating as unavailable: %s", name, exc)
        return CapabilityProbe(name=name, available=False, reason=f"probe failed: {exc}")

    reason = "available" if available else "reported unavailable"
    return CapabilityProbe(name=name, available=available, reason=reason)
