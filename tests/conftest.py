"""Pytest configuration and fixtures for har-recorder tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def temp_har_file(tmp_path: Path):
    """Create a temporary HAR file for testing."""

    def _create_har(entries: list[dict] | None = None, name: str = "test.har") -> Path:
        if entries is None:
            entries = []

        har_data = {"log": {"version": "1.2", "entries": entries}}

        har_file = tmp_path / name
        har_file.write_text(json.dumps(har_data), encoding="utf-8")
        return har_file

    return _create_har


@pytest.fixture
def sample_har_entry():
    """Create a sample HAR entry for testing."""

    def _create_entry(
        url: str = "http://example.com/",
        status: int = 200,
        mime_type: str | None = "text/html",
        size: float | None = 0,
        time: float | None = 0,
        timings: dict[str, Any] | None = None,
        method: str = "GET",
    ) -> dict:
        content: dict[str, Any] = {}
        if mime_type is not None:
            content["mimeType"] = mime_type
        if size is not None:
            content["size"] = size
        entry: dict[str, Any] = {
            "request": {"method": method, "url": url, "headers": []},
            "response": {"status": status, "statusText": "", "headers": [], "content": content},
        }
        if time is not None:
            entry["time"] = time
        if timings is not None:
            entry["timings"] = timings
        return entry

    return _create_entry
