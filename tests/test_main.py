import asyncio
import importlib

from loguru import logger


def test_invalid_environment_exits_with_status_one(monkeypatch):
    monkeypatch.setenv("START_YEAR", "2030")
    monkeypatch.setenv("END_YEAR", "2020")

    # importing the entry point must not load settings
    entry = importlib.reload(importlib.import_module("main"))

    records = []
    sink = logger.add(lambda message: records.append(message.record), level="CRITICAL")
    try:
        assert asyncio.run(entry.main()) == 1
    finally:
        logger.remove(sink)

    assert [record["level"].name for record in records] == ["CRITICAL"]
    assert "Invalid configuration" in records[0]["message"]
    assert "start_year (2030) must not be after end_year (2020)" in records[0]["message"]
