"""CLI for har-recorder.

This module provides a Typer-based CLI for HAR recording and statistics.

Requires the 'cli' optional dependency: pip install har-recorder[cli]
"""

from __future__ import annotations
