# -*- coding: utf-8 -*-
"""Base notification strategy."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from rare_sniper.notifications.types import RareItemsMessage

if TYPE_CHECKING:  # pragma: no cover
    from rare_sniper.config.config import Settings


class BaseNotificationStrategy(ABC):
    """Abstract base class for notification channels."""

    def __init__(self, settings: "Settings"):
        """
        Initialize the base strategy.

        Args:
            settings: Global configuration (Settings).
        """
        self.settings = settings

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """Whether the channel is initialized and accepting messages."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Open connections / clients."""
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Release connections / clients."""
        pass

    @abstractmethod
    async def send_notification(self, message: RareItemsMessage) -> bool:
        """
        Deliver a message.

        Args:
            message: Batch of rare items to deliver.

        Returns:
            True if the channel accepted the message.
        """
        pass
