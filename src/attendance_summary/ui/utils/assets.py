from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import customtkinter as ctk
from PIL import Image, UnidentifiedImageError


@lru_cache(maxsize=1)
def _assets_root() -> Path | None:
    base_path = Path(__file__).resolve()
    for parent in base_path.parents:
        candidate = parent / "assets"
        if candidate.is_dir():
            return candidate
    return None


def get_asset_path(filename: str) -> Path | None:
    assets_dir = _assets_root()
    if assets_dir is None:
        return None

    image_path = assets_dir / filename
    return image_path if image_path.exists() else None


def load_icon_image(filename: str, size: tuple[int, int]) -> ctk.CTkImage | None:
    image_path = get_asset_path(filename)
    if image_path is None:
        return None

    try:
        with Image.open(image_path) as img:
            pil_image = img.convert("RGBA")
    except (OSError, UnidentifiedImageError):
        return None

    return ctk.CTkImage(light_image=pil_image, dark_image=pil_image, size=size)
