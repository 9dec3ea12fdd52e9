"""Document rasterization module."""
from .models import SourceFile
from .rasterizer import DocumentRasterizer

__all__ = ["SourceFile", "DocumentRasterizer"]
