"""
In-memory location share store.

Shares live only in this process. Each entry gets a timer on the running
event loop that removes it when ``expires`` is reached; reads also check the
expiry so an entry whose timer has not fired yet is never served.
"""

from __future__ import annotations

import asyncio
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from towgo.core.database.base import as_utc, utc_now
from towgo.core.logging_config import get_logger
from towgo.core.models.io.common import GeoPoint
from towgo.core.models.io.location_share import LocationShare

logger = get_logger(__name__)


def apply_privacy(share: LocationShare) -> LocationShare:
    """
    Reduce a share to what its accuracy level allows.

    - ``exact``: unchanged
    - ``approximate``: coordinates rounded to 2 decimals (about 1 km)
    - ``city``: coordinates dropped, address cut to its first component

    Vehicle details are only kept when the sharer opted in.
    """
    update: dict = {}
    if share.accuracy == "approximate" and share.location is not None:
        update["location"] = GeoPoint(lat=round(share.location.lat, 2), lng=round(share.location.lng, 2))
    elif share.accuracy == "city":
        update["location"] = None
        update["address"] = share.address.split(",")[0].strip()
    if not share.include_vehicle_info:
        update["vehicle_info"] = None
    return share.model_copy(update=update)


class LocationShareStore:
    """Share id to share map with per-entry expiry."""

    def __init__(self) -> None:
        self._shares: Dict[str, LocationShare] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}

    def __len__(self) -> int:
        return len(self._shares)

    @staticmethod
    def _now() -> datetime:
        return utc_now()

    def _is_expired(self, share: LocationShare, now: Optional[datetime] = None) -> bool:
        return as_utc(share.expires) <= (now or self._now())

    def create(self, share: LocationShare) -> str:
        """
        Store a share and schedule its removal.

        Args:
            share: Validated share; ``expires`` must be in the future

        Returns:
            The new share id

        Raises:
            ValueError: ``expires`` is not in the future
        """
        delay = (as_utc(share.expires) - self._now()).total_seconds()
        if delay <= 0:
            raise ValueError("Share expiry must be in the future")

        share_id = str(uuid.uuid4())
        self._shares[share_id] = share
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running event loop; share {share_id} expires lazily")
        else:
            self._timers[share_id] = loop.call_later(delay, self._expire, share_id)
        logger.info(f"Created location share {share_id} expiring at {share.expires.isoformat()}")
        return share_id

    def _expire(self, share_id: str) -> None:
        self._timers.pop(share_id, None)
        if self._shares.pop(share_id, None) is not None:
            logger.debug(f"Location share {share_id} expired")

    def get(self, share_id: str) -> Optional[LocationShare]:
        share = self._shares.get(share_id)
        if share is None:
            return None
        if self._is_expired(share):
            self._remove(share_id)
            return None
        return share

    def delete(self, share_id: str) -> bool:
        if self.get(share_id) is None:
            return False
        self._remove(share_id)
        logger.info(f"Deleted location share {share_id}")
        return True

    def list_active(self) -> List[Tuple[str, LocationShare]]:
        """Active shares; expired ones found during the scan are removed."""
        now = self._now()
        active: List[Tuple[str, LocationShare]] = []
        for share_id, share in list(self._shares.items()):
            if self._is_expired(share, now):
                self._remove(share_id)
            else:
                active.append((share_id, share))
        return active

    def _remove(self, share_id: str) -> None:
        self._shares.pop(share_id, None)
        timer = self._timers.pop(share_id, None)
        if timer is not None:
            timer.cancel()

    def clear(self) -> None:
        """Drop every share and cancel all timers."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._shares.clear()


location_share_store = LocationShareStore()
