"""
Visible lock indicator for Bookmark Guard.
"""

import logging
from abc import ABC, abstractmethod


class BaseIndicator(ABC):
    """A badge-like surface that shows whether protection is on."""

    @abstractmethod
    def set_badge_text(self, text: str) -> None:
        pass


class BadgeIndicator(BaseIndicator):
    """
    Indicator that keeps the current badge text in memory.

    Hosts without a real toolbar read `text`; every change is logged.
    """

    def __init__(self):
        self.text = ""

    def set_badge_text(self, text: str) -> None:
        if text != self.text:
            logging.debug(f"Badge text set to {text!r}")
        self.text = text
