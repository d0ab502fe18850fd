"""Set up default classes and props for NiceGUI widgets.

Applies one text size and dense props to the widget types the dashboard
page uses.
"""

from __future__ import annotations

from nicegui import ui

from incomedash.utils.logging import get_logger

logger = get_logger(__name__)

# map tailwind to quasar size
TEXT_SIZE_QUASAR = {
    "text-xs": "xs",
    "text-sm": "sm",
    "text-base": "md",
    "text-lg": "lg",
}


def setUpGuiDefaults(text_size: str = 'text-base'):
    """Set up default classes and props for all ui elements.

    Args:
        text_size: Tailwind CSS text size class (e.g., 'text-xs', 'text-sm',
                   'text-base', 'text-lg'). Defaults to 'text-base'.
    """
    text_size_quasar = TEXT_SIZE_QUASAR[text_size]

    logger.debug(f'using classes text_size:"{text_size}" text_size_quasar:{text_size_quasar}')

    ui.label.default_classes(f"{text_size} select-text")  # select-text allows double-click selection
    ui.label.default_props("dense")
    #
    ui.button.default_classes(text_size)
    ui.button.default_props(f"dense size={text_size_quasar}")
    #
    ui.input.default_classes(text_size)
    ui.input.default_props("dense")
