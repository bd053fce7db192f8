from __future__ import annotations

from pathlib import Path
from tkinter import StringVar
from typing import Any, Callable

import customtkinter as ctk
from customtkinter import filedialog

from attendance_summary.config.user_settings_store import DEFAULT_SETTINGS, UserSettingsStore
from attendance_summary.models import DEFAULT_ATTENDANCE_WEIGHTS
from attendance_summary.ui.theme import (
    STATUS_TONES,
    VS_ACCENT,
    VS_ACCENT_HOVER,
    VS_BG,
    VS_BORDER,
    VS_DIVIDER,
    VS_SURFACE,
    VS_SURFACE_ALT,
    VS_TEXT,
    VS_TEXT_MUTED,
)


class SettingsView(ctk.CTkFrame):
    """Settings form for the attendance weight table and the data folder."""

    def __init__(
        self,
        master: Any,
        *,
        store: UserSettingsStore,
        on_settings_saved: Callable[[dict[str, Any]], None] | None = None,
    ) -> None:
        super().__init__(master, fg_color=VS_BG)
        self._store = store
        self._on_settings_saved = on_settings_saved

        self._app_data_dir_var = StringVar()
        self._weight_rows: list[tuple[StringVar, StringVar, ctk.CTkFrame]] = []

        self._status_label: ctk.CTkLabel | None = None
        self._weights_frame: ctk.CTkFrame | None = None

        self._build_layout()
        self.refresh()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def refresh(self) -> None:
        """Reload the form inputs from the underlying store."""

        self._load_weights(self._store.weights())
        app_data_dir = self._store.get("app_data_dir", DEFAULT_SETTINGS["app_data_dir"])
        self._app_data_dir_var.set(str(app_data_dir))
        self._set_status("")

    # ------------------------------------------------------------------
    # Layout helpers
    # ------------------------------------------------------------------
    def _build_layout(self) -> None:
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        container = ctk.CTkScrollableFrame(self, fg_color=VS_SURFACE, corner_radius=18)
        container.grid(row=0, column=0, padx=24, pady=24, sticky="nsew")
        container.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            container,
            text="Application settings",
            font=ctk.CTkFont(size=28, weight="bold"),
            text_color=VS_TEXT,
        ).grid(row=0, column=0, sticky="w", padx=28, pady=(28, 8))

        ctk.CTkLabel(
            container,
            text=(
                "Each attendance status is scored by the lowest weight among the keywords it contains. "
                "Statuses matching no keyword count as fully present."
            ),
            justify="left",
            wraplength=640,
            text_color=VS_TEXT_MUTED,
        ).grid(row=1, column=0, sticky="w", padx=28, pady=(0, 20))

        ctk.CTkLabel(
            container, text="Attendance weights", text_color=VS_TEXT, font=ctk.CTkFont(size=18)
        ).grid(row=2, column=0, sticky="w", padx=28, pady=(0, 6))

        self._weights_frame = ctk.CTkFrame(container, fg_color=VS_SURFACE)
        self._weights_frame.grid(row=3, column=0, sticky="ew", padx=28)
        self._weights_frame.grid_columnconfigure(0, weight=1)

        ctk.CTkButton(
            container,
            text="Add keyword",
            width=140,
            text_color=VS_TEXT,
            fg_color=VS_SURFACE_ALT,
            hover_color=VS_DIVIDER,
            command=lambda: self._add_weight_row("", ""),
        ).grid(row=4, column=0, sticky="w", padx=28, pady=(6, 18))

        self._build_app_data_field(container, row=5)

        buttons_row = ctk.CTkFrame(container, fg_color=VS_SURFACE)
        buttons_row.grid(row=7, column=0, sticky="ew", padx=28, pady=(12, 24))
        buttons_row.grid_columnconfigure(0, weight=1)

        ctk.CTkButton(
            buttons_row,
            text="Reset to defaults",
            width=160,
            text_color=VS_TEXT,
            fg_color=VS_SURFACE_ALT,
            hover_color=VS_DIVIDER,
            command=self._handle_reset,
        ).grid(row=0, column=1, padx=(0, 8))

        ctk.CTkButton(
            buttons_row,
            text="Save changes",
            width=180,
            text_color=VS_TEXT,
            fg_color=VS_ACCENT,
            hover_color=VS_ACCENT_HOVER,
            command=self._handle_save,
        ).grid(row=0, column=2)

        self._status_label = ctk.CTkLabel(
            container,
            text="",
            text_color=VS_TEXT_MUTED,
            wraplength=640,
            justify="left",
        )
        self._status_label.grid(row=8, column=0, sticky="w", padx=28, pady=(0, 12))

    def _build_app_data_field(self, parent: ctk.CTkFrame, *, row: int) -> None:
        ctk.CTkLabel(parent, text="App data directory", text_color=VS_TEXT, font=ctk.CTkFont(size=18)).grid(
            row=row, column=0, sticky="w", padx=28, pady=(0, 6)
        )

        field_container = ctk.CTkFrame(parent, fg_color=VS_SURFACE)
        field_container.grid(row=row + 1, column=0, sticky="w", padx=28, pady=(0, 6))

        ctk.CTkEntry(
            field_container,
            textvariable=self._app_data_dir_var,
            fg_color=VS_BG,
            border_color=VS_BORDER,
            text_color=VS_TEXT,
            width=540,
        ).grid(row=0, column=0, sticky="w", padx=(0, 12))

        ctk.CTkButton(
            field_container,
            text="Browse",
            width=100,
            text_color=VS_TEXT,
            fg_color=VS_SURFACE_ALT,
            hover_color=VS_DIVIDER,
            command=self._choose_app_data_dir,
        ).grid(row=0, column=1, sticky="w")

    def _load_weights(self, weights: dict[str, float]) -> None:
        for _, _, frame in self._weight_rows:
            frame.destroy()
        self._weight_rows.clear()
        for keyword, weight in weights.items():
            self._add_weight_row(keyword, f"{weight:g}")

    def _add_weight_row(self, keyword: str, weight: str) -> None:
        if self._weights_frame is None:
            return

        keyword_var = StringVar(value=keyword)
        weight_var = StringVar(value=weight)
        frame = ctk.CTkFrame(self._weights_frame, fg_color=VS_SURFACE)
        frame.grid(row=len(self._weight_rows), column=0, sticky="w", pady=2)

        ctk.CTkEntry(
            frame,
            textvariable=keyword_var,
            placeholder_text="Keyword",
            width=320,
            fg_color=VS_BG,
            border_color=VS_BORDER,
            text_color=VS_TEXT,
        ).grid(row=0, column=0, padx=(0, 8))
        ctk.CTkEntry(
            frame,
            textvariable=weight_var,
            placeholder_text="0-1",
            width=80,
            fg_color=VS_BG,
            border_color=VS_BORDER,
            text_color=VS_TEXT,
        ).grid(row=0, column=1, padx=(0, 8))

        entry = (keyword_var, weight_var, frame)
        ctk.CTkButton(
            frame,
            text="Remove",
            width=90,
            text_color=VS_TEXT,
            fg_color=VS_SURFACE_ALT,
            hover_color=VS_DIVIDER,
            command=lambda: self._remove_weight_row(entry),
        ).grid(row=0, column=2)
        self._weight_rows.append(entry)

    def _remove_weight_row(self, entry: tuple[StringVar, StringVar, ctk.CTkFrame]) -> None:
        if entry in self._weight_rows:
            self._weight_rows.remove(entry)
            entry[2].destroy()
        for index, (_, _, frame) in enumerate(self._weight_rows):
            frame.grid_configure(row=index)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def _handle_reset(self) -> None:
        self._load_weights(dict(DEFAULT_ATTENDANCE_WEIGHTS))
        self._app_data_dir_var.set(str(DEFAULT_SETTINGS["app_data_dir"]))
        self._set_status("Fields reset. Save to persist the changes.", tone="info")

    def _handle_save(self) -> None:
        errors: list[str] = []
        weights: dict[str, float] = {}

        for keyword_var, weight_var, _ in self._weight_rows:
            keyword = keyword_var.get().strip()
            raw_weight = weight_var.get().strip()
            if not keyword and not raw_weight:
                continue
            if not keyword:
                errors.append(f"Weight {raw_weight} has no keyword.")
                continue
            try:
                weight = float(raw_weight)
            except ValueError:
                errors.append(f"Weight for '{keyword}' must be a number.")
                continue
            if not 0 <= weight <= 1:
                errors.append(f"Weight for '{keyword}' must be between 0 and 1.")
                continue
            weights[keyword] = weight

        app_data_raw = self._app_data_dir_var.get().strip()
        app_data_dir: Path | None = None
        if app_data_raw:
            candidate = Path(app_data_raw).expanduser()
            try:
                candidate.mkdir(parents=True, exist_ok=True)
                app_data_dir = candidate
            except OSError:
                errors.append("Unable to create or access the selected app data directory.")
        else:
            errors.append("App data directory is required.")

        if errors:
            self._set_status("\n".join(errors), tone="warning")
            return

        updated = self._store.update(attendance_weights=weights, app_data_dir=str(app_data_dir))
        self.refresh()
        self._set_status("Settings saved successfully.", tone="success")

        if self._on_settings_saved is not None:
            self._on_settings_saved(updated)

    def _choose_app_data_dir(self) -> None:
        initial_dir = self._app_data_dir_var.get().strip() or None
        selected = filedialog.askdirectory(
            title="Select app data directory",
            initialdir=initial_dir,
        )
        if selected:
            self._app_data_dir_var.set(str(Path(selected).expanduser()))

    def _set_status(self, message: str, *, tone: str = "info") -> None:
        if self._status_label is None:
            return
        self._status_label.configure(text=message, text_color=STATUS_TONES.get(tone, VS_TEXT_MUTED))
