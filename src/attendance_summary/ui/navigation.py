from __future__ import annotations

from attendance_summary.ui.components.collapsible_nav import NavigationItem


NAV_ITEMS: tuple[NavigationItem, ...] = (
    NavigationItem(
        key="summary",
        label="Attendance summary",
        icon_text="AS",
        icon_filename="summary.png",
    ),
    NavigationItem(
        key="transfer",
        label="Transfer records",
        icon_text="TR",
        icon_filename="transfer.png",
    ),
    NavigationItem(
        key="settings",
        label="Settings",
        icon_text="ST",
        icon_filename="settings.png",
        pinned_bottom=True,
    ),
)
