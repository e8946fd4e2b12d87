"""
HistoryLib - Undo/redo support

This module provides reversible edit commands and the edit history
that undoes and redoes them.
"""

from IV_Libs.HistoryLib.edit_history import (
    CommandKind,
    EditHistory,
    ReversibleCommand,
)

__all__ = [
    "CommandKind",
    "EditHistory",
    "ReversibleCommand",
]
