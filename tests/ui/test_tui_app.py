from __future__ import annotations

import pytest

from src.tcis.services import collection, inventory
from src.tcis.ui.app import InventoryTUI, render_panels


def test_render_panels_empty_inventory() -> None:
    panels = render_panels(inventory.collect_status())

    assert panels == {
        "money": "Money: $0.00",
        "collection": "Collection\n(no cards)",
        "binders": "Binders\n(none)",
        "decks": "Decks\n(none)",
    }


def test_render_panels_lists_cards() -> None:
    collection.add_new_card("Mew", 2.0, "rare", "alt-art")

    panels = render_panels(inventory.collect_status())

    assert panels["collection"] == "Collection\nMew (Rare, Alt-art) $6.00 x1"


@pytest.mark.asyncio
async def test_tui_runs_commands() -> None:
    app = InventoryTUI()
    async with app.run_test() as pilot:
        result = app.handle_line("card add Shock -v 1 -r common")
        await pilot.pause()

        assert result is not None and result.exit_code == 0
        assert collection.find_card("Shock") is not None


@pytest.mark.asyncio
async def test_tui_reset_waits_for_confirmation() -> None:
    collection.add_new_card("Shock", 1.0, "common")
    app = InventoryTUI()
    async with app.run_test() as pilot:
        assert app.handle_line("reset") is None
        assert app.handle_line("no") is None
        await pilot.pause()
        assert collection.find_card("Shock") is not None

        app.handle_line("reset")
        result = app.handle_line("yes")
        await pilot.pause()

        assert result is not None and result.exit_code == 0
        assert collection.list_cards() == []
