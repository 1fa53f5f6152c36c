"""Partitioning an event stream at level-1 headings."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from mdbook_split.markdown.events import Event, is_heading_start

logger = logging.getLogger(__name__)

# One future chapter's events, in document order
EventRun = list[Event]


def is_boundary(event: Event) -> bool:
    """Check whether an event opens a level-1 heading.

    Nesting does not matter: a heading inside a block quote, list item or
    footnote definition is a boundary too, and the containers around it are
    left open in one run and closed in the next.
    """
    return is_heading_start(event, level=1)


def split(events: Iterable[Event]) -> list[EventRun]:
    """Split events into runs that each start at a level-1 heading.

    The first level-1 heading does not close an empty run; content before
    it (if any) becomes a run of its own. A document without level-1
    headings yields a single run, and an empty document yields none.

    Args:
        events: The document's events.

    Returns:
        Non-empty runs in document order.
    """
    runs: list[EventRun] = []
    current: EventRun = []

    for event in events:
        if current and is_boundary(event):
            runs.append(current)
            current = [event]
        else:
            current.append(event)

    if current:
        runs.append(current)

    logger.debug(f"Split event stream into {len(runs)} run(s)")
    return runs
