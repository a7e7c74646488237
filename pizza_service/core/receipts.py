"""
Signed order receipts — a JWT proving what was ordered, by whom, and where.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from jose import JWTError, jwt

from pizza_service.core.config import settings


def create_order_receipt(order: dict[str, Any], diner: dict[str, Any]) -> str:
    now = datetime.now(timezone.utc)
    return jwt.encode(
        {
            "vendor": settings.PROJECT_NAME,
            "diner": diner,
            "order": order,
            "iat": int(now.timestamp()),
        },
        settings.RECEIPT_SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def decode_order_receipt(receipt: str) -> dict | None:
    """Return the receipt claims if the signature checks out, else ``None``."""
    try:
        return jwt.decode(receipt, settings.RECEIPT_SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
