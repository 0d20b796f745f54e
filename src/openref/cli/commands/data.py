from __future__ import annotations

from dataclasses import dataclass

from openref.config import OpenRefConfig


@dataclass
class Data:
    config: OpenRefConfig

    __slots__ = ("config",)
