"""Convert statement documents into page images."""
import base64
import io
from typing import List

import pdfplumber
from PIL import Image

from .models import SourceFile
from statementsense.llm.models import PageImage
from statementsense.utils.logger import get_logger
from statementsense.utils.exceptions import RasterizeError

logger = get_logger()


class DocumentRasterizer:
    """Renders PDFs page by page and wraps image files as a single page."""

    # Image types the vision model accepts as-is; anything else is re-encoded
    NATIVE_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/heic", "image/heif"}

    def __init__(self, resolution: int = 144, jpeg_quality: int = 85):
        """
        Initialize rasterizer.

        Args:
            resolution: Render resolution in dpi (144 is twice the PDF native scale)
            jpeg_quality: JPEG quality for rendered pages
        """
        self.resolution = resolution
        self.jpeg_quality = jpeg_quality

    def rasterize(self, source: SourceFile) -> List[PageImage]:
        """
        Convert a document into ordered page images.

        Unsupported media types yield no pages.

        Raises:
            RasterizeError: If a PDF or image cannot be read
        """
        if source.is_pdf:
            return self._render_pdf(source)

        if source.is_image:
            return [self._load_image(source)]

        logger.warning(f"Unsupported media type {source.media_type} for {source.name}, skipping")
        return []

    def _render_pdf(self, source: SourceFile) -> List[PageImage]:
        images = []
        try:
            with pdfplumber.open(source.path) as pdf:
                logger.debug(f"Rendering {len(pdf.pages)} pages from {source.name}")
                for i, page in enumerate(pdf.pages, 1):
                    rendered = page.to_image(resolution=self.resolution)
                    images.append(self._encode(rendered.original))
                    logger.debug(f"Rendered page {i} of {source.name}")
        except Exception as e:
            raise RasterizeError(f"Failed to render {source.name}: {e}")

        if not images:
            raise RasterizeError(f"No pages found in {source.name}")

        logger.info(f"Rendered {len(images)} pages from {source.name}")
        return images

    def _load_image(self, source: SourceFile) -> PageImage:
        try:
            if source.media_type in self.NATIVE_IMAGE_TYPES:
                data = source.path.read_bytes()
                return PageImage(
                    data=base64.b64encode(data).decode("ascii"),
                    mime_type=source.media_type
                )

            with Image.open(source.path) as image:
                return self._encode(image)
        except Exception as e:
            raise RasterizeError(f"Failed to read image {source.name}: {e}")

    def _encode(self, image: Image.Image) -> PageImage:
        """JPEG-encode a rendered page."""
        buffer = io.BytesIO()
        image.convert("RGB").save(buffer, format="JPEG", quality=self.jpeg_quality)
        return PageImage(data=base64.b64encode(buffer.getvalue()).decode("ascii"))
