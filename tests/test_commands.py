# tests/test_commands.py

from __future__ import annotations

import pytest

from checklist_app.cli.commands import CommandRegistry
from checklist_app.cli.commands import registry as command_registry


@pytest.mark.asyncio
async def test_command_registry_routes_sync_and_async(app) -> None:
    reg = CommandRegistry()
    called = {"sync": 0, "async": 0}

    def h_sync(app, args, emit):
        called["sync"] += 1
        return "sync:" + ",".join(args)

    async def h_async(app, args, emit):
        called["async"] += 1
        if emit is not None:
            emit("note")
        return "async"

    reg.register("a", h_sync, "a", aliases=["aa"])
    reg.register("b", h_async, "b")

    assert await reg.handle(app, "/a x y") == "sync:x,y"
    assert await reg.handle(app, "/AA") == "sync:"
    assert await reg.handle(app, "/b", emit=lambda _: None) == "async"
    assert called == {"sync": 2, "async": 1}


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(app) -> None:
    reg = CommandRegistry()
    assert await reg.handle(app, "hello") is None
    assert "Unknown command" in (await reg.handle(app, "/nope") or "")


@pytest.mark.asyncio
async def test_form_flow_through_commands(app) -> None:
    await app.start(with_poller=False)

    alert = await command_registry.handle(app, "/new Groceries")
    assert alert is not None and alert.startswith("[ALERT]")

    await command_registry.handle(app, "/cat shopping")
    await command_registry.handle(app, "/new Groceries")
    await command_registry.handle(app, "/desc milk and eggs")
    await command_registry.handle(app, "/deadline 2099-12-31")
    await command_registry.handle(app, "/remind 2099-12-30T18:00")
    reply = await command_registry.handle(app, "/save")

    assert reply == "Task added."
    listing = await command_registry.handle(app, "/list")
    assert listing is not None
    assert "Groceries (Shopping)" in listing
    assert "Reminders: 0/1 fired" in listing


@pytest.mark.asyncio
async def test_selection_and_bulk_delete_commands(app, confirm) -> None:
    await app.start(with_poller=False)
    await command_registry.handle(app, "/cat Work")

    assert await command_registry.handle(app, "/selectall on") == "2 task(s) selected."
    reply = await command_registry.handle(app, "/bulkdelete")

    assert reply == "Deleted 2 task(s)."
    assert len(confirm.prompts) == 1
    assert sorted(app.store.calls_of("delete")) == ["b", "c"]
    assert await command_registry.handle(app, "/bulkdelete") == "Nothing selected."


@pytest.mark.asyncio
async def test_bad_task_number_is_an_alert(app) -> None:
    await app.start(with_poller=False)
    reply = await command_registry.handle(app, "/done 9")
    assert reply == "[ALERT] No task #9 in this view."
