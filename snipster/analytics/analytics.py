"""
Analytics module for Snipster.

Responsibilities:
    - Expose the click log of a link
    - Summarize clicks per code (totals, last click, referrer breakdown)
    - Report how much validity a link has left

Unlike a standalone click logger, nothing is tracked here: clicks are stored on
the links themselves by `LinkManager.resolve`, and this module only reads them.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from ..clock import Clock, now_ms
from ..models import Click, Link


def time_left(expires_at: int, now: int) -> Tuple[str, bool]:
    """
    Human-readable remaining validity.

    Returns:
        Tuple[str, bool]: ("Expired", True) once `expires_at - now <= 0`,
        otherwise ("{minutes}m {seconds}s", False).
    """
    diff = expires_at - now
    if diff <= 0:
        return "Expired", True
    minutes, rest = divmod(diff, 60_000)
    return f"{minutes}m {rest // 1000}s", False


class Analytics:
    def __init__(self, clock: Clock = now_ms):
        self.clock = clock

    def get_clicks(self, links: Sequence[Link], code: str) -> List[Click]:
        """
        Get all click events for a given code.

        Returns:
            List[Click]: Click events in recorded order, empty if the code is unknown.
        """
        for link in links:
            if link.code == code:
                return list(link.clicks)
        return []

    def summary(self, links: Sequence[Link], only_active: bool = False) -> Dict[str, Dict]:
        """
        Get a summary of click events for all links.

        Args:
            links (Sequence[Link]): The stored collection.
            only_active (bool): If True, skip links whose time left has run out.

        Notes:
            - `expired` mirrors `time_left` and is already True at `now == expires_at`,
              while `LinkManager.resolve` still redirects at that instant. Do not use
              it as the redirect decision.

        Returns:
            Dict[str, Dict]: Mapping code -> summary including:
                - total_clicks: int
                - last_click: int timestamp or None
                - referrers: dict with referrer counts
                - expired: bool
                - time_left: str

        Example:
            {
                "promo": {
                    "total_clicks": 3,
                    "last_click": 1755835287551,
                    "referrers": {"direct": 2, "https://news.example": 1},
                    "expired": False,
                    "time_left": "12m 5s",
                }
            }
        """
        now = self.clock()
        summary_data: Dict[str, Dict] = {}
        for link in links:
            remaining, expired = time_left(link.expires_at, now)
            if only_active and expired:
                continue

            referrers: Dict[str, int] = {}
            for click in link.clicks:
                referrers[click.referrer] = referrers.get(click.referrer, 0) + 1

            last: Optional[Click] = link.last_click
            summary_data[link.code] = {
                "total_clicks": len(link.clicks),
                "last_click": last.timestamp if last else None,
                "referrers": referrers,
                "expired": expired,
                "time_left": remaining,
            }
        return summary_data
