"""cmd-keeper-installer: resolve, verify and install the cmd-keeper binary."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
