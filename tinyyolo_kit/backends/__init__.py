"""
Optional inference backends for tinyyolo_kit.

Backends are kept in a separate module so the decode/suppress core stays
lightweight and can be used without installing inference runtimes.
"""

from __future__ import annotations

__all__ = []
