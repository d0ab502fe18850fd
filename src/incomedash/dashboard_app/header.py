"""Header component for the income dashboard app.

Provides build_dashboard_header() with title, reload button and theme toggle.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Optional

from nicegui import app, ui

THEME_STORAGE_KEY = "incomedash_dark_mode"


def build_dashboard_header(
    *,
    title: str = "Income Analysis Dashboard",
    on_reload: Optional[Callable[[], Awaitable[None]]] = None,
) -> ui.dark_mode:
    """Build header with title, optional reload button and theme toggle.

    Args:
        title: Text shown on the left.
        on_reload: Async callback for the reload button; hidden when None.

    Returns:
        Dark mode controller for the page.
    """
    dark_mode = ui.dark_mode()
    dark_mode.value = app.storage.user.get(THEME_STORAGE_KEY, False)

    def _update_theme_icon() -> None:
        icon = "light_mode" if dark_mode.value else "dark_mode"
        theme_btn.props(f"icon={icon}")

    def _toggle_theme() -> None:
        dark_mode.value = not dark_mode.value
        app.storage.user[THEME_STORAGE_KEY] = dark_mode.value
        _update_theme_icon()

    with ui.header().classes("items-center justify-between").props("dense").style(
        "min-height: 36px; height: 36px; padding: 0 8px;"
    ):
        with ui.row().classes("items-center gap-2"):
            ui.label(title).classes("!text-lg font-bold text-white")

        with ui.row().classes("items-center gap-2"):
            if on_reload is not None:
                ui.button(icon="refresh", on_click=on_reload).props(
                    "flat round dense text-color=white"
                ).tooltip("Reload dataset")
            theme_btn = ui.button(
                icon="light_mode" if dark_mode.value else "dark_mode",
                on_click=_toggle_theme,
            ).props("flat round dense text-color=white").tooltip("Toggle dark / light mode")
            _update_theme_icon()

    return dark_mode
