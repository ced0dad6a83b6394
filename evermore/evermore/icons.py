from enum import Enum
from typing import Optional


class CategoryIcon(str, Enum):
    """Budget category icons the client knows how to render."""

    VENUE = "venue"
    CATERING = "catering"
    FLOWERS = "flowers"
    PHOTOGRAPHY = "photography"

    @classmethod
    def resolve(cls, key: Optional[str]) -> "CategoryIcon":
        """Unknown or missing keys render as the venue icon."""
        if key:
            normalized = key.strip().lower()
            for icon in cls:
                if icon.value == normalized:
                    return icon
        return cls.VENUE

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]


_GLYPHS = {
    CategoryIcon.VENUE: "home",
    CategoryIcon.CATERING: "utensils",
    CategoryIcon.FLOWERS: "flower-2",
    CategoryIcon.PHOTOGRAPHY: "camera",
}
