"""
Merge device-local and server result sets.

The browser keeps a local copy of every completed test and, for signed-in
users, the server keeps another. Before scoring the two are combined by
``test_id``:

  1. Each source is first collapsed to one record per test (latest
     ``completed_at`` wins, ties to the later entry).
  2. Local records are laid down first. A server record for the same test
     replaces the local one in place unless the local record is strictly
     newer. Equal or missing timestamps go to the server copy.
  3. Tests present in only one source are kept.

Key order is first appearance, so a server-only test lands after the local
ones. The result has unique ``test_id`` values.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from dyslexia_screener.models.result import ResultRecord
from dyslexia_screener.scoring.engine import latest_per_test

logger = logging.getLogger(__name__)


def _local_is_newer(local: ResultRecord, remote: ResultRecord) -> bool:
    if local.completed_at is None or remote.completed_at is None:
        return False
    return local.completed_at > remote.completed_at


def merge_result_sets(
    local:  Iterable[ResultRecord],
    remote: Iterable[ResultRecord],
) -> list[ResultRecord]:
    """Combine two result sets, most recent completion winning per test.

    Args:
        local:  Results stored on the device.
        remote: Results fetched from the server.

    Returns:
        One ``ResultRecord`` per test id.
    """
    merged: dict[str, ResultRecord] = {}
    for record in latest_per_test(list(local)):
        merged[record.test_id] = record

    overridden = kept_local = 0
    for record in latest_per_test(list(remote)):
        current = merged.get(record.test_id)
        if current is not None and _local_is_newer(current, record):
            kept_local += 1
            continue
        if current is not None:
            overridden += 1
        merged[record.test_id] = record

    logger.debug(
        "Merged results: %d test(s), %d replaced by remote, %d newer local kept",
        len(merged), overridden, kept_local,
    )
    return list(merged.values())
