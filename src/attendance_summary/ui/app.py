from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from tkinter import PhotoImage, TclError

import customtkinter as ctk

from attendance_summary.config import settings as settings_module
from attendance_summary.config.settings import refresh_settings_from_store, user_settings_store
from attendance_summary.data import Database
from attendance_summary.services import AttendanceSummaryService
from attendance_summary.ui.components.collapsible_nav import CollapsibleNav
from attendance_summary.ui.navigation import NAV_ITEMS
from attendance_summary.ui.settings_view import SettingsView
from attendance_summary.ui.summary_view import AttendanceSummaryView
from attendance_summary.ui.theme import VS_BG
from attendance_summary.ui.transfer_view import TransferRecordsView
from attendance_summary.ui.utils import get_asset_path

log = logging.getLogger(__name__)

WINDOW_STATE_FILENAME = "window_position.json"


class AttendanceSummaryApp:
    def __init__(self) -> None:
        settings = settings_module.settings
        ctk.set_appearance_mode("dark")

        self._root = ctk.CTk()
        self._root.title(settings.app_name)
        self._root.geometry("1280x720")
        self._root.minsize(1080, 640)
        self._root.configure(fg_color=VS_BG)

        icon_path = get_asset_path("icon.png")
        self._icon_photo: PhotoImage | None = None
        if icon_path is not None:
            try:
                self._icon_photo = PhotoImage(file=str(icon_path))
                self._root.iconphoto(True, self._icon_photo)
            except TclError:
                log.warning("Could not load window icon from %s", icon_path)
                self._icon_photo = None

        self._root.grid_rowconfigure(0, weight=1)
        self._root.grid_columnconfigure(1, weight=1)

        self._database = Database(settings.database_path)
        self._summary_service = AttendanceSummaryService(self._database, weights=user_settings_store.weights())
        self._summary_service.initialize()
        log.info("Using database %s", settings.database_path)

        self._nav = CollapsibleNav(self._root, items=NAV_ITEMS, on_select=self._show_view)
        self._nav.grid(row=0, column=0, sticky="nsw")

        self._content = ctk.CTkFrame(self._root, corner_radius=0, fg_color=VS_BG)
        self._content.grid(row=0, column=1, sticky="nsew")
        self._content.grid_rowconfigure(0, weight=1)
        self._content.grid_columnconfigure(0, weight=1)

        self._summary_view = AttendanceSummaryView(self._content, self._summary_service)
        self._transfer_view = TransferRecordsView(
            self._content,
            self._summary_service,
            submitter_id=settings.operator_id,
        )
        self._settings_view = SettingsView(
            self._content,
            store=user_settings_store,
            on_settings_saved=self._handle_settings_saved,
        )
        self._views: dict[str, ctk.CTkFrame] = {
            "summary": self._summary_view,
            "transfer": self._transfer_view,
            "settings": self._settings_view,
        }

        for view in self._views.values():
            view.grid(row=0, column=0, sticky="nsew")

        self._nav.select("summary")

        self._restore_window_position()
        self._root.protocol("WM_DELETE_WINDOW", self._on_close)

    def _show_view(self, key: str) -> None:
        for view in self._views.values():
            view.grid_remove()
        view = self._views.get(key)
        if view is None:
            return
        view.grid()
        if key == "settings":
            self._settings_view.refresh()
        elif key == "transfer":
            self._transfer_view.refresh()

    def _handle_settings_saved(self, _updated: dict[str, object]) -> None:
        previous_db_path = self._database.path
        settings = refresh_settings_from_store()

        if settings.database_path != previous_db_path:
            log.info("Database moved from %s to %s", previous_db_path, settings.database_path)
            self._database = Database(settings.database_path)
            self._summary_service.use_database(self._database)
            self._summary_view.refresh()
            self._transfer_view.refresh()

        self._summary_service.set_weights(user_settings_store.weights())

    def _window_state_file(self) -> Path:
        return user_settings_store.pointer_dir / WINDOW_STATE_FILENAME

    def _restore_window_position(self) -> None:
        state_file = self._window_state_file()
        if not state_file.exists():
            return
        try:
            with state_file.open("r", encoding="utf-8") as handle:
                position = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            log.warning("Ignoring saved window position: %s", exc)
            return

        if not isinstance(position, dict):
            return
        x, y = position.get("x"), position.get("y")
        if not isinstance(x, int) or not isinstance(y, int):
            return
        if 0 <= x < self._root.winfo_screenwidth() and 0 <= y < self._root.winfo_screenheight():
            self._root.geometry(f"{position.get('width', 1280)}x{position.get('height', 720)}+{x}+{y}")

    def _on_close(self) -> None:
        matches = re.match(r"(\d+)x(\d+)\+(-?\d+)\+(-?\d+)", self._root.geometry())
        if matches:
            width, height, x, y = map(int, matches.groups())
            try:
                with self._window_state_file().open("w", encoding="utf-8") as handle:
                    json.dump({"width": width, "height": height, "x": x, "y": y}, handle)
            except OSError as exc:
                log.warning("Could not save window position: %s", exc)

        self._root.destroy()

    def run(self) -> None:
        self._root.mainloop()

