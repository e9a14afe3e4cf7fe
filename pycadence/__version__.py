from __future__ import annotations

__version__ = __VERSION__ = "1.0.0"
