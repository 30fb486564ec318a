"""
L1 Domain — Ordered probe with fallback.

The one "try preferred, then the next" loop. Used for the Python
module, the GDAL module, the local interpreter scan and the installer
tool. The activator decides what "available" means; the prober only
walks the list.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from geostack.core.models.resolution import Candidate

logger = logging.getLogger(__name__)


def probe_first(
    candidates: Iterable[Candidate],
    activator: Callable[[Candidate], bool],
    *,
    label: str = "candidate",
) -> Candidate | None:
    """Return the best-ranked candidate the activator accepts.

    Candidates are tried in ascending ``rank`` (ties keep list order).
    A rejected candidate, or an activator that hits a missing binary
    (``OSError``), just moves the probe on to the next one.

    Args:
        candidates: Preference list.
        activator: Attempts to bring one candidate into effect.
        label: Resource name used in log lines.

    Returns:
        The selected candidate, or ``None`` when every candidate failed.
    """
    for candidate in sorted(candidates, key=lambda c: c.rank):
        try:
            accepted = activator(candidate)
        except OSError as e:
            logger.debug("%s %s unavailable: %s", label, candidate.name, e)
            continue
        if accepted:
            logger.info("Selected %s: %s", label, candidate.name)
            return candidate
        logger.debug("%s %s rejected", label, candidate.name)

    logger.info("No %s available", label)
    return None
