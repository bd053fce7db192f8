from __future__ import annotations

# Core surfaces
VS_BG = "#1E1E1E"
VS_SURFACE = "#252526"
VS_SURFACE_ALT = "#2D2D30"
VS_SIDEBAR = "#252526"

# Borders and outlines
VS_BORDER = "#3C3C3C"
VS_DIVIDER = "#2F2F2F"

# Accent colors
VS_ACCENT = "#0E639C"
VS_ACCENT_HOVER = "#1177BB"

# Text colors
VS_TEXT = "#F3F3F3"
VS_TEXT_MUTED = "#9DA5B4"
# Summary rows use light band colours, so their text stays dark.
VS_TEXT_ON_BAND = "#1E1E1E"

# Status colors
VS_SUCCESS = "#6A9955"
VS_WARNING = "#F48771"

STATUS_TONES = {
    "info": VS_TEXT_MUTED,
    "success": VS_SUCCESS,
    "warning": VS_WARNING,
}
