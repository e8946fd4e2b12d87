"""
Constants and configuration values for Image Viewer.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# Application
APP_NAME = "ImageViewer"
APP_VERSION = "Version 3.1"

# Pixel buffer
DEFAULT_FILL_COLOR = (0, 0, 0)
CHANNEL_MIN = 0
CHANNEL_MAX = 255

# Filter names (catalog order)
FILTER_DARKER = "Darker"
FILTER_LIGHTER = "Lighter"
FILTER_THRESHOLD = "Threshold"
FILTER_INVERT = "Invert"
FILTER_SOLARIZE = "Solarize"
FILTER_SMOOTH = "Smooth"
FILTER_PIXELIZE = "Pixelize"
FILTER_MIRROR = "Mirror"
FILTER_GRAYSCALE = "Grayscale"
FILTER_EDGE_DETECTION = "Edge Detection"
FILTER_FISH_EYE = "Fish Eye"

# Filter parameters
BRIGHTNESS_FACTOR = 0.7
THRESHOLD_LOW = 85
THRESHOLD_HIGH = 170
THRESHOLD_GRAY = (128, 128, 128)
SOLARIZE_LIMIT = 127
PIXELIZE_BLOCK_SIZE = 5
EDGE_TOLERANCE = 20
FISH_EYE_SCALE = 20

# History
UNDO_LIMIT = 100

# Status messages
STATUS_NO_IMAGE = "No image loaded."
STATUS_FILE_LOADED = "File loaded."
STATUS_FILE_SAVED = "File saved."
STATUS_SAVE_FAILED = "The image could not be saved."
STATUS_INVALID_FORMAT = "The file was not in a recognized image file format."
STATUS_CLOSED = "Image closed."
STATUS_APPLIED_PREFIX = "Applied: "
STATUS_ENLARGED = "Enlarged."
STATUS_SHRUNK = "Shrunk."
STATUS_CROPPED = "Cropped."
STATUS_UNDO_PREFIX = "Undo: "
STATUS_REDO_PREFIX = "Redo: "
STATUS_NOTHING_TO_UNDO = "Nothing to undo."
STATUS_NOTHING_TO_REDO = "Nothing to redo."
STATUS_PREVIEW_DISCARDED = "Crop cancelled."

# File handling
DEFAULT_OUTPUT_FORMAT = "PNG"
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp"}
EXTENSION_FORMATS = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".bmp": "BMP",
    ".gif": "GIF",
    ".tiff": "TIFF",
    ".webp": "WEBP",
}
OPEN_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp)"

# UI constants
DEFAULT_WINDOW_WIDTH = 640
DEFAULT_WINDOW_HEIGHT = 480
CROP_DIALOG_WIDTH = 250
CROP_DIALOG_HEIGHT = 120
NO_FILE_LABEL = "No file displayed."
FILE_LABEL_PREFIX = "File: "
