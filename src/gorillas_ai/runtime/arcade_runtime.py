"""Thin arcade window wrapper driven manually from a fixed-rate loop."""

from __future__ import annotations

from collections import OrderedDict, deque
import time

import arcade

from gorillas_ai.errors import WindowClosed


class ArcadeWindowController:
    """Owns the optional arcade window and tracks its input state.

    All public coordinates are top-left (y grows downwards) like the game world.
    """

    def __init__(
        self,
        width: int,
        height: int,
        title: str,
        enabled: bool = True,
        queue_input_events: bool = True,
        vsync: bool = False,
    ):
        self.width = int(width)
        self.height = int(height)
        self.queue_input_events = bool(queue_input_events)
        self.window: arcade.Window | None = None
        self.closed = False
        self._mouse_buttons_down: set[int] = set()
        self._mouse_position: tuple[float, float] | None = None
        self._key_presses: deque[int] = deque()

        if not enabled:
            return
        self.window = arcade.Window(self.width, self.height, title, vsync=vsync)
        self.window.push_handlers(
            on_key_press=self._on_key_press,
            on_mouse_motion=self._on_mouse_motion,
            on_mouse_drag=self._on_mouse_drag,
            on_mouse_press=self._on_mouse_press,
            on_mouse_release=self._on_mouse_release,
            on_mouse_leave=self._on_mouse_leave,
            on_close=self._on_close,
        )

    def _on_key_press(self, symbol: int, modifiers: int) -> None:
        if self.queue_input_events:
            self._key_presses.append(symbol)

    def _on_mouse_motion(self, x: float, y: float, dx: float, dy: float) -> None:
        self._mouse_position = (x, y)

    def _on_mouse_drag(self, x: float, y: float, dx: float, dy: float, buttons: int, modifiers: int) -> None:
        self._mouse_position = (x, y)

    def _on_mouse_press(self, x: float, y: float, button: int, modifiers: int) -> None:
        self._mouse_position = (x, y)
        self._mouse_buttons_down.add(button)

    def _on_mouse_release(self, x: float, y: float, button: int, modifiers: int) -> None:
        self._mouse_position = (x, y)
        self._mouse_buttons_down.discard(button)

    def _on_mouse_leave(self, x: float, y: float) -> None:
        self._mouse_position = None

    def _on_close(self) -> None:
        self.closed = True

    def close(self) -> None:
        if self.window is not None:
            self.window.close()
            self.window = None

    def poll_events_or_raise(self) -> None:
        if self.window is None:
            return
        self.window.switch_to()
        self.window.dispatch_events()
        if self.closed:
            self.window = None
            raise WindowClosed("Window closed")

    def is_mouse_button_down(self, button: int) -> bool:
        return button in self._mouse_buttons_down

    def drain_key_presses(self) -> list[int]:
        presses = list(self._key_presses)
        self._key_presses.clear()
        return presses

    def mouse_position(self) -> tuple[float, float] | None:
        """Pointer position in top-left coordinates, or ``None`` outside the window."""
        if self._mouse_position is None:
            return None
        x, y = self._mouse_position
        return x, self.to_top_left_y(y)

    def clear(self, color) -> None:
        if self.window is not None:
            self.window.clear(color=color)

    def flip(self) -> None:
        if self.window is not None:
            self.window.flip()

    def to_arcade_y(self, y: float) -> float:
        return self.height - y

    def to_top_left_y(self, y: float) -> float:
        return self.height - y

    def top_left_to_bottom(self, top: float, height: float) -> float:
        return self.height - top - height


class ArcadeFrameClock:
    """Sleep-based limiter for manually driven loops."""

    def __init__(self):
        self._last_tick = time.perf_counter()

    def tick(self, fps: int | float) -> float:
        """Wait out the rest of the frame; returns seconds since the previous tick."""
        if fps and fps > 0:
            frame_seconds = 1.0 / float(fps)
            remaining = frame_seconds - (time.perf_counter() - self._last_tick)
            if remaining > 0:
                time.sleep(remaining)
        now = time.perf_counter()
        elapsed = now - self._last_tick
        self._last_tick = now
        return elapsed


class TextCache:
    """LRU cache of ``arcade.Text`` objects keyed by their content and style."""

    def __init__(self, max_entries: int = 256):
        self.max_entries = int(max_entries)
        self._entries: OrderedDict[tuple, arcade.Text] = OrderedDict()

    def get_text(
        self,
        text: str,
        color,
        font_size: int,
        font_name: str | tuple[str, ...] = ("Arial", "calibri"),
        anchor_x: str = "left",
        anchor_y: str = "baseline",
    ) -> arcade.Text:
        key = (text, tuple(color), font_size, font_name, anchor_x, anchor_y)
        text_obj = self._entries.get(key)
        if text_obj is not None:
            self._entries.move_to_end(key)
            return text_obj

        text_obj = arcade.Text(
            text,
            0,
            0,
            color,
            font_size,
            font_name=font_name,
            anchor_x=anchor_x,
            anchor_y=anchor_y,
        )
        self._entries[key] = text_obj
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
        return text_obj
