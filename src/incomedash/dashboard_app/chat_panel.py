"""Floating "Data Guide" chat panel.

UI only; answers come from incomedash.dashboard.chat_rules.
"""

from __future__ import annotations

from typing import Optional

from nicegui import ui

from incomedash.dashboard.chat_rules import ChatMessage, ChatSession

# Delay before the bot reply is shown, in seconds.
REPLY_DELAY_S = 0.5


class ChatPanel:
    """Chat bubble button that opens a small message window."""

    def __init__(self, session: Optional[ChatSession] = None) -> None:
        self.session = session if session is not None else ChatSession()
        self._window: Optional[ui.card] = None
        self._bubble: Optional[ui.button] = None
        self._messages: Optional[ui.column] = None
        self._scroll: Optional[ui.scroll_area] = None
        self._input: Optional[ui.input] = None

    def build(self) -> None:
        with ui.page_sticky(position="bottom-right", x_offset=20, y_offset=20):
            self._bubble = ui.button(icon="chat", on_click=lambda: self._set_open(True)).props("round color=primary")
            with ui.card().classes("w-80 h-96 p-0 gap-0") as self._window:
                with ui.row().classes("w-full items-center justify-between p-2 bg-primary text-white"):
                    ui.label("Data Guide").classes("font-semibold")
                    ui.button(icon="close", on_click=lambda: self._set_open(False)).props(
                        "flat round dense text-color=white"
                    )
                with ui.scroll_area().classes("w-full flex-1") as self._scroll:
                    self._messages = ui.column().classes("w-full gap-1 p-2")
                with ui.row().classes("w-full items-center p-2 no-wrap"):
                    self._input = ui.input(placeholder="Ask a question...").classes("flex-1")
                    self._input.on("keydown.enter", self._on_send)
                    ui.button("Send", on_click=self._on_send)
        for msg in self.session.messages:
            self._append(msg)
        self._set_open(False)

    def _set_open(self, is_open: bool) -> None:
        self._window.set_visibility(is_open)
        self._bubble.set_visibility(not is_open)

    def _append(self, msg: ChatMessage) -> None:
        with self._messages:
            ui.chat_message(msg.text, sent=msg.sender == "user", name=None if msg.sender == "user" else "Guide")
        self._scroll.scroll_to(percent=1.0)

    def _on_send(self, _e=None) -> None:
        text = self._input.value or ""
        n_before = len(self.session.messages)
        reply = self.session.send(text)
        if reply is None:
            return
        self._append(self.session.messages[n_before])  # the user message
        self._input.value = ""
        ui.timer(REPLY_DELAY_S, lambda: self._append(reply), once=True)
