from __future__ import annotations

import logging

from logging_config import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="datastore.reading_store",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Swept expired readings",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_extra_fields() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    output = formatter.format(_record(removed_readings=3, removed_sessions=1, unrelated="x"))

    assert output == "Swept expired readings | removed_readings=3 removed_sessions=1"


def test_formatter_leaves_plain_messages_alone() -> None:
    formatter = ContextualFormatter(fmt="%(message)s", extra_keys=["pairing_code"])

    assert formatter.format(_record(bpm=72)) == "Swept expired readings"
