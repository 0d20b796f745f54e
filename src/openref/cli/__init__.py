from __future__ import annotations

from openref.cli.commands import openref, resolve

__all__ = ["openref", "resolve"]
