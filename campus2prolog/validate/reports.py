"""Validation reporting."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def build_validation_report(
    errors: list[str],
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    """Build a serialisable report dict."""
    return {
        "errors": errors,
        "warnings": warnings or [],
        "ok": len(errors) == 0,
    }


def save_validation_report(report: dict[str, Any], path: Path) -> None:
    path.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
