"""Tests for document rasterization."""
import base64
import io
import unittest
import tempfile
from pathlib import Path
from unittest import mock

from PIL import Image

from statementsense.pdf import DocumentRasterizer, SourceFile
from statementsense.utils.exceptions import RasterizeError


class FakePageImage:
    def __init__(self, size):
        self.original = Image.new("RGB", size, "white")


class FakePage:
    def __init__(self, size=(100, 140)):
        self.size = size
        self.resolutions = []

    def to_image(self, resolution):
        self.resolutions.append(resolution)
        return FakePageImage(self.size)


class FakePDF:
    def __init__(self, pages):
        self.pages = pages

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class TestSourceFile(unittest.TestCase):

    def test_media_type_guessed_from_name(self):
        self.assertEqual(SourceFile.from_path("/tmp/March.PDF").media_type, "application/pdf")
        self.assertTrue(SourceFile.from_path("scan.png").is_image)
        self.assertEqual(SourceFile.from_path("data.unknownext").media_type, "application/octet-stream")

    def test_declared_type_wins(self):
        source = SourceFile.from_path("statement", media_type="application/pdf")
        self.assertTrue(source.is_pdf)


class TestDocumentRasterizer(unittest.TestCase):
    """Test rasterizer behaviour per media type."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)
        self.rasterizer = DocumentRasterizer(resolution=144, jpeg_quality=85)

    def tearDown(self):
        self.tmp.cleanup()

    def test_png_is_single_page_passthrough(self):
        path = self.dir / "scan.png"
        Image.new("RGB", (20, 20), "red").save(path, format="PNG")

        pages = self.rasterizer.rasterize(SourceFile.from_path(path))

        self.assertEqual(len(pages), 1)
        self.assertEqual(pages[0].mime_type, "image/png")
        self.assertEqual(base64.b64decode(pages[0].data), path.read_bytes())

    def test_other_image_types_reencoded_as_jpeg(self):
        path = self.dir / "scan.gif"
        Image.new("P", (20, 20)).save(path, format="GIF")

        pages = self.rasterizer.rasterize(SourceFile.from_path(path))

        self.assertEqual(pages[0].mime_type, "image/jpeg")
        decoded = Image.open(io.BytesIO(base64.b64decode(pages[0].data)))
        self.assertEqual(decoded.format, "JPEG")

    def test_unreadable_image_raises(self):
        path = self.dir / "broken.gif"
        path.write_bytes(b"not an image")

        with self.assertRaises(RasterizeError):
            self.rasterizer.rasterize(SourceFile.from_path(path))

    def test_unsupported_type_yields_no_pages(self):
        path = self.dir / "notes.txt"
        path.write_text("hello")

        self.assertEqual(self.rasterizer.rasterize(SourceFile.from_path(path)), [])

    def test_pdf_renders_every_page_in_order(self):
        pages = [FakePage((100, 140)), FakePage((120, 160))]

        with mock.patch("statementsense.pdf.rasterizer.pdfplumber.open", return_value=FakePDF(pages)):
            images = self.rasterizer.rasterize(SourceFile.from_path(self.dir / "s.pdf"))

        self.assertEqual(len(images), 2)
        self.assertTrue(all(img.mime_type == "image/jpeg" for img in images))
        self.assertEqual([p.resolutions for p in pages], [[144], [144]])
        sizes = [Image.open(io.BytesIO(base64.b64decode(img.data))).size for img in images]
        self.assertEqual(sizes, [(100, 140), (120, 160)])

    def test_pdf_without_pages_raises(self):
        with mock.patch("statementsense.pdf.rasterizer.pdfplumber.open", return_value=FakePDF([])):
            with self.assertRaises(RasterizeError):
                self.rasterizer.rasterize(SourceFile.from_path(self.dir / "empty.pdf"))

    def test_corrupt_pdf_raises(self):
        path = self.dir / "corrupt.pdf"
        path.write_bytes(b"%PDF-garbage")

        with self.assertRaises(RasterizeError):
            self.rasterizer.rasterize(SourceFile.from_path(path))


if __name__ == "__main__":
    unittest.main()
