from __future__ import annotations

from openref import errors, openapi
from openref.config import OpenRefConfig as Config
from openref.core.version import OPENREF_VERSION
from openref.openapi.references import Engine, ResolutionContext

__version__ = OPENREF_VERSION

__all__ = [
    "__version__",
    "Config",
    "Engine",
    "ResolutionContext",
    "errors",
    "openapi",
]
