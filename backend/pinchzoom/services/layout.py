"""
Rest-state layout for an image inside a viewport.
"""

from enum import Enum

from pinchzoom.services.transform import AffineTransform


class ScaleType(str, Enum):
    """How the image is laid out before any gesture touches it."""
    MATRIX = "MATRIX"                # Keep whatever transform is current
    FIT_XY = "FIT_XY"                # Stretch both axes independently
    FIT_START = "FIT_START"          # Uniform fit, aligned top-left
    FIT_CENTER = "FIT_CENTER"        # Uniform fit, centered
    FIT_END = "FIT_END"              # Uniform fit, aligned bottom-right
    CENTER = "CENTER"                # No scaling, centered
    CENTER_CROP = "CENTER_CROP"      # Uniform fill, centered, overflow cropped
    CENTER_INSIDE = "CENTER_INSIDE"  # Like FIT_CENTER but never upscales


def fit_transform(
    scale_type: ScaleType,
    viewport_width: float,
    viewport_height: float,
    image_width: float,
    image_height: float,
) -> AffineTransform:
    """
    Compute the transform that lays out an image according to `scale_type`.

    Args:
        scale_type: Layout rule
        viewport_width: Width of the viewport
        viewport_height: Height of the viewport
        image_width: Intrinsic width of the image
        image_height: Intrinsic height of the image

    Returns:
        The rest transform. Identity when any size is missing or the
        scale type is MATRIX.
    """
    if scale_type == ScaleType.MATRIX:
        return AffineTransform.identity()
    if viewport_width <= 0 or viewport_height <= 0 or image_width <= 0 or image_height <= 0:
        return AffineTransform.identity()

    ratio_x = viewport_width / image_width
    ratio_y = viewport_height / image_height

    if scale_type == ScaleType.FIT_XY:
        return AffineTransform(scale_x=ratio_x, scale_y=ratio_y, tx=0.0, ty=0.0)

    if scale_type == ScaleType.CENTER:
        scale = 1.0
    elif scale_type == ScaleType.CENTER_CROP:
        scale = max(ratio_x, ratio_y)
    elif scale_type == ScaleType.CENTER_INSIDE:
        scale = min(1.0, ratio_x, ratio_y)
    else:
        scale = min(ratio_x, ratio_y)

    # Free space along each axis (negative when the image overflows)
    free_x = viewport_width - image_width * scale
    free_y = viewport_height - image_height * scale

    if scale_type == ScaleType.FIT_START:
        tx, ty = 0.0, 0.0
    elif scale_type == ScaleType.FIT_END:
        tx, ty = free_x, free_y
    else:
        tx, ty = free_x * 0.5, free_y * 0.5

    return AffineTransform(scale_x=scale, scale_y=scale, tx=tx, ty=ty)
