from .base import Driver
from .file import FileDriver

__all__ = ["Driver", "FileDriver"]
