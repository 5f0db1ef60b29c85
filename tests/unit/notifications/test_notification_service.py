# -*- coding: utf-8 -*-
"""Unit tests for RareItemNotificationService."""

from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace
from typing import Any, cast
from unittest.mock import AsyncMock

from rare_sniper.models.item import Item
from rare_sniper.notifications import RareItemNotificationService, RareItemsMessage


def _notifier(name: str, **send: Any) -> SimpleNamespace:
    return SimpleNamespace(
        name=name,
        initialize=AsyncMock(),
        shutdown=AsyncMock(),
        send_notification=AsyncMock(**send),
    )


def _service(*notifiers: SimpleNamespace, logger: Callable[[str], Any]) -> RareItemNotificationService:
    return RareItemNotificationService(notifiers=cast(Any, list(notifiers)), get_logger=logger)


async def test_notify_sends_one_message_to_every_channel(
    rare_item_factory: Callable[..., Item], quiet_logger: Callable[[str], Any]
) -> None:
    a = _notifier("A", return_value=True)
    b = _notifier("B", return_value=True)
    service = _service(a, b, logger=quiet_logger)

    sent = await service.notify([rare_item_factory(0), rare_item_factory(1)], "Makers")

    assert sent is True
    message = a.send_notification.await_args.args[0]
    assert isinstance(message, RareItemsMessage)
    assert message.collection_name == "Makers"
    assert [i.mint_address for i in message.items] == ["mint-0", "mint-1"]
    b.send_notification.assert_awaited_once_with(message)


async def test_notify_succeeds_if_any_channel_delivers(
    rare_item_factory: Callable[..., Item], quiet_logger: Callable[[str], Any]
) -> None:
    broken = _notifier("Broken", side_effect=RuntimeError("down"))
    ok = _notifier("Ok", return_value=True)

    sent = await _service(broken, ok, logger=quiet_logger).notify([rare_item_factory(0)], "Makers")

    assert sent is True
    ok.send_notification.assert_awaited_once()


async def test_notify_fails_when_no_channel_delivers(
    rare_item_factory: Callable[..., Item], quiet_logger: Callable[[str], Any]
) -> None:
    rejected = _notifier("Rejected", return_value=False)
    broken = _notifier("Broken", side_effect=RuntimeError("down"))

    sent = await _service(rejected, broken, logger=quiet_logger).notify([rare_item_factory(0)], "Makers")

    assert sent is False


async def test_notify_without_items_or_channels_sends_nothing(
    rare_item_factory: Callable[..., Item], quiet_logger: Callable[[str], Any]
) -> None:
    channel = _notifier("A", return_value=True)

    assert await _service(channel, logger=quiet_logger).notify([], "Makers") is False
    assert await _service(logger=quiet_logger).notify([rare_item_factory(0)], "Makers") is False
    channel.send_notification.assert_not_awaited()


async def test_lifecycle_reaches_every_channel_and_survives_shutdown_errors(
    quiet_logger: Callable[[str], Any],
) -> None:
    a = _notifier("A")
    b = _notifier("B")
    a.shutdown = AsyncMock(side_effect=RuntimeError("already closed"))
    service = _service(a, b, logger=quiet_logger)

    await service.initialize()
    await service.shutdown()

    assert service.enabled_channels == ["A", "B"]
    a.initialize.assert_awaited_once()
    b.initialize.assert_awaited_once()
    b.shutdown.assert_awaited_once()
