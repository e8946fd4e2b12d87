"""
ImageEditingLib - Core image editing functionality

This module provides the pixel buffer, filters, geometry operations
and image file codec for the Image Viewer project.
"""

from IV_Libs.ImageEditingLib.image_models import (
    CropMargins,
    ImageEditingError,
    InvalidFormatError,
    InvalidGeometryError,
    OutOfRangeError,
    PixelBuffer,
    PreviewClosedError,
    PreviewInProgressError,
    RgbColor,
)
from IV_Libs.ImageEditingLib.pixel_filters import (
    FilterCatalog,
    create_default_catalog,
    get_default_catalog,
)
from IV_Libs.ImageEditingLib.geometry_ops import (
    crop,
    enlarge,
    shrink,
    validate_crop_margins,
)
from IV_Libs.ImageEditingLib.image_codec import (
    from_pil_image,
    load_image,
    read_image,
    save_image,
    to_pil_image,
)

__all__ = [
    "CropMargins",
    "ImageEditingError",
    "InvalidFormatError",
    "InvalidGeometryError",
    "OutOfRangeError",
    "PixelBuffer",
    "PreviewClosedError",
    "PreviewInProgressError",
    "RgbColor",
    "FilterCatalog",
    "create_default_catalog",
    "get_default_catalog",
    "crop",
    "enlarge",
    "shrink",
    "validate_crop_margins",
    "from_pil_image",
    "load_image",
    "read_image",
    "save_image",
    "to_pil_image",
]
