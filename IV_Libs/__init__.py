"""
IV_Libs - Image Viewer Library Modules

This package contains the editing engine of the Image Viewer project,
organized into specialized sub-packages:

- ImageEditingLib: Pixel buffer, filters, geometry operations and codec
- HistoryLib: Reversible commands and the undo/redo history
- EditorLib: Engine composition root, preview sessions and the Qt window
"""

__version__ = "0.1.0"
