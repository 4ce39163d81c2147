"""Helpers for handling the API credential safely."""
from __future__ import annotations

from typing import Optional


def mask_credential(credential: Optional[str]) -> str:
    """Obscure most of a credential so it can be displayed or logged."""
    if not credential:
        return "unset"
    value = credential.strip()
    if not value:
        return "unset"
    if len(value) <= 8:
        return "*" * len(value)
    prefix = value[:3]
    return f"{prefix}…{value[-4:]}"


__all__ = ["mask_credential"]
