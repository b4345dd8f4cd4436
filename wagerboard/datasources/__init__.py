from .base import SheetSource
from .sheet import PublishedSheetSource

__all__ = [
    "SheetSource",
    "PublishedSheetSource",
]
