"""Root logger setup for the ``nexus`` command line."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for CLI output.

    ``httpx`` request lines are only shown at WARNING and above unless ``level``
    is stricter still; ingestion already logs one line per document.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
