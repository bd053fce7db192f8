from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

import customtkinter as ctk

from attendance_summary.ui.theme import (
    VS_ACCENT,
    VS_ACCENT_HOVER,
    VS_BORDER,
    VS_SIDEBAR,
    VS_SURFACE_ALT,
    VS_TEXT,
)
from attendance_summary.ui.utils import load_icon_image

ICON_SIZE: tuple[int, int] = (32, 32)
BUTTON_HEIGHT = ICON_SIZE[1] + 18


@dataclass(frozen=True)
class NavigationItem:
    key: str
    label: str
    icon_text: str | None = None
    icon_filename: str | None = None
    pinned_bottom: bool = False


class CollapsibleNav(ctk.CTkFrame):
    def __init__(
        self,
        master,
        items: Iterable[NavigationItem],
        on_select: Callable[[str], None],
        *,
        width: int = 220,
    ) -> None:
        super().__init__(
            master,
            width=width,
            corner_radius=0,
            fg_color=VS_SIDEBAR,
            border_width=1,
            border_color=VS_BORDER,
        )
        self._items = list(items)
        self._on_select = on_select
        self._is_collapsed = False
        self._expanded_width = width
        self._collapsed_width = max(ICON_SIZE[0] + 44, 84)
        self._icons: dict[str, ctk.CTkImage | None] = {
            item.key: load_icon_image(item.icon_filename, ICON_SIZE) if item.icon_filename else None
            for item in self._items
        }

        self.grid_columnconfigure(0, weight=1)
        self.grid_propagate(False)

        self._toggle_button = ctk.CTkButton(
            self,
            text="☰",
            width=self._expanded_width - 24,
            height=36,
            command=self._toggle,
            corner_radius=6,
            fg_color=VS_SURFACE_ALT,
            hover_color=VS_ACCENT_HOVER,
            text_color=VS_TEXT,
            font=ctk.CTkFont(size=20, weight="bold"),
            border_width=1,
            border_color=VS_BORDER,
        )
        self._toggle_button.grid(row=0, column=0, padx=8, pady=(12, 6), sticky="ew")

        self._buttons: dict[str, ctk.CTkButton] = {}
        top_items = [item for item in self._items if not item.pinned_bottom]
        bottom_items = [item for item in self._items if item.pinned_bottom]

        row_index = 1
        for item in top_items:
            self._add_button(item, row=row_index, pady=4)
            row_index += 1

        # Spacer pushes pinned items to the bottom of the rail.
        self.grid_rowconfigure(row_index, weight=1)
        row_index += 1

        for item in bottom_items:
            self._add_button(item, row=row_index, pady=12)
            row_index += 1

        self._selection_key: str | None = None
        self._update_buttons_for_state(self._expanded_width)

    def _add_button(self, item: NavigationItem, *, row: int, pady: int) -> None:
        icon_image = self._icons.get(item.key)
        button = ctk.CTkButton(
            self,
            text=item.label,
            width=self._expanded_width - 24,
            anchor="w",
            command=lambda k=item.key: self.select(k),
            height=BUTTON_HEIGHT,
            fg_color=VS_SIDEBAR,
            hover_color=VS_SURFACE_ALT,
            text_color=VS_TEXT,
            font=ctk.CTkFont(size=16, weight="bold"),
            border_width=1,
            border_color=VS_BORDER,
            image=icon_image,
            compound="left" if icon_image is not None else "center",
        )
        button.grid(row=row, column=0, padx=12, pady=pady, sticky="ew")
        self._buttons[item.key] = button

    def select(self, key: str) -> None:
        if key not in self._buttons:
            return
        if self._selection_key:
            self._buttons[self._selection_key].configure(fg_color=VS_SIDEBAR)
        self._buttons[key].configure(fg_color=VS_ACCENT)
        self._selection_key = key
        self._on_select(key)

    def _toggle(self) -> None:
        self._is_collapsed = not self._is_collapsed
        new_width = self._collapsed_width if self._is_collapsed else self._expanded_width
        self.configure(width=new_width)
        self._toggle_button.configure(
            text="➤" if self._is_collapsed else "☰",
            width=new_width - 24,
        )
        self._update_buttons_for_state(new_width)
        self.update_idletasks()

    def _update_buttons_for_state(self, current_width: int) -> None:
        target_width = current_width - 24
        for item in self._items:
            button = self._buttons[item.key]
            icon_image = self._icons.get(item.key)
            if self._is_collapsed:
                button.configure(
                    text="" if icon_image is not None else (item.icon_text or item.label[:2].upper()),
                    image=icon_image,
                    compound="center",
                    anchor="center",
                    width=target_width,
                    border_spacing=0,
                )
            else:
                button.configure(
                    text=item.label,
                    image=icon_image,
                    compound="left" if icon_image is not None else "center",
                    anchor="w",
                    width=target_width,
                    border_spacing=6,
                )
