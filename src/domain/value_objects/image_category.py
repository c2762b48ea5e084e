from __future__ import annotations

from enum import Enum


class ImageCategory(str, Enum):
    MUZZLE = "muzzle"
    FACE = "face"
    LEFT = "left"
    RIGHT = "right"
    FULL_BODY_LEFT = "full_body_left"
    FULL_BODY_RIGHT = "full_body_right"


REQUIRED_IMAGE_COUNTS: dict[ImageCategory, int] = {
    ImageCategory.MUZZLE: 3,
    ImageCategory.FACE: 3,
    ImageCategory.LEFT: 3,
    ImageCategory.RIGHT: 3,
    ImageCategory.FULL_BODY_LEFT: 1,
    ImageCategory.FULL_BODY_RIGHT: 1,
}

TOTAL_REQUIRED_IMAGES = sum(REQUIRED_IMAGE_COUNTS.values())
