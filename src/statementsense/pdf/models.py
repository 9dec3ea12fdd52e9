"""Data models for input documents."""
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class SourceFile:
    """A user-supplied statement document."""
    name: str
    path: Path
    media_type: str  # Declared MIME type, e.g. application/pdf

    @classmethod
    def from_path(cls, path, media_type: Optional[str] = None) -> "SourceFile":
        """Build a SourceFile, guessing the media type from the file name if not given."""
        path = Path(path)
        if media_type is None:
            media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(name=path.name, path=path, media_type=media_type)

    @property
    def is_pdf(self) -> bool:
        return self.media_type == "application/pdf"

    @property
    def is_image(self) -> bool:
        return self.media_type.startswith("image/")
