"""Unit tests for package version resolution and reporting."""

from __future__ import annotations

import importlib.metadata
import importlib.util
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import pytest

import websearch


def test_dunder_version_matches_package_metadata_or_fallback() -> None:
    """__version__ should come from package metadata when available."""
    try:
        expected = version("websearch-mcp")
    except PackageNotFoundError:
        expected = "0.0.0+unknown"

    assert websearch.__version__ == expected


def test_missing_package_metadata_emits_warning(monkeypatch: pytest.MonkeyPatch) -> None:
    """Missing package metadata should trigger a warning and fallback version."""

    def _raise_package_not_found(_name: str) -> str:
        raise PackageNotFoundError

    monkeypatch.setattr(importlib.metadata, "version", _raise_package_not_found)

    init_path = Path(__file__).resolve().parents[2] / "src" / "websearch" / "__init__.py"
    spec = importlib.util.spec_from_file_location("websearch_version_test", init_path)
    assert spec is not None
    assert spec.loader is not None

    module = importlib.util.module_from_spec(spec)
    with pytest.warns(
        RuntimeWarning,
        match="Package metadata for 'websearch-mcp' not found",
    ):
        spec.loader.exec_module(module)

    assert module.__version__ == "0.0.0+unknown"


def test_server_reports_package_version() -> None:
    """The MCP initialize handshake should carry our version, not the SDK's."""
    from websearch.server import mcp

    assert mcp._mcp_server.version == websearch.__version__
