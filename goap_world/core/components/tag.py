"""Tag component used to look entities up by kind."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Tag:
    """Label such as ``"food"`` or ``"bed"`` attached to an entity."""

    name: str


__all__ = ["Tag"]
