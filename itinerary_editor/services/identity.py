"""Tracks which server-side record an editing session reads from and writes to."""

from collections.abc import Mapping
from logging import getLogger
from typing import Any

from itinerary_editor.configs import file_logger

logger = file_logger(getLogger(__name__))


class IdentityResolver:
    """
    Identity triple of an editing session.

    ``itinerary_id`` is the id the session was opened with. Loading the
    customizable copy reveals ``customized_ai_id`` (the clone, where saves go)
    and ``original_ai_id`` (where cancel returns to).
    """

    __slots__ = ("_customization_route", "customized_ai_id", "itinerary_id", "original_ai_id")

    def __init__(self, itinerary_id: str, *, on_customization_route: bool = False) -> None:
        self.itinerary_id = itinerary_id
        self.customized_ai_id: str | None = None
        self.original_ai_id: str | None = None
        self._customization_route = on_customization_route

    @property
    def on_customization_route(self) -> bool:
        return self._customization_route

    @property
    def save_target(self) -> str:
        return self.customized_ai_id or self.itinerary_id

    @property
    def cancel_target(self) -> str:
        return self.original_ai_id or self.itinerary_id

    def capture(self, data: Mapping[str, Any]) -> None:
        """Record the clone and original ids carried by a load response."""
        customized = data.get("aiGeneratedId")
        original = data.get("originalAiGeneratedId")
        if customized:
            self.customized_ai_id = str(customized)
        if original:
            self.original_ai_id = str(original)
        logger.info(
            f"Identity for {self.itinerary_id}: save -> {self.save_target}, "
            f"cancel -> {self.cancel_target}",
        )

    def enter_customization(self) -> bool:
        """
        Mark the one-time switch to the customization route.

        Returns:
            False when the session already runs on that route.
        """
        if self._customization_route:
            return False
        self._customization_route = True
        return True
