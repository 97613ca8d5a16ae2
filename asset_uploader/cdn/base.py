"""
CDN client capability: invalidate a set of paths on a distribution.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Sequence


class CDNClient(ABC):
    """Abstract CDN client."""

    @abstractmethod
    def create_invalidation(
        self,
        distribution_id: str,
        paths: Sequence[str],
        caller_reference: str,
    ) -> Dict[str, Any]:
        """
        Request invalidation of ``paths`` on a distribution.

        Blocking. Raises on transport failure.

        Returns:
            Raw response; a successful one carries ``{"Invalidation": {"Id": ...}}``
        """
