import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

PNG_HEADER = bytes.fromhex("89504E470D0A1A0A")
JPEG_HEADER = bytes.fromhex("FFD8FFE000104A464946")
EXE_HEADER = bytes.fromhex("4D5A90000300000004000000")
WEBP_HEADER = b"RIFF\x24\x00\x00\x00WEBPVP8 "


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def png_bytes() -> bytes:
    return PNG_HEADER + b"\x00" * 64


@pytest.fixture()
def jpeg_bytes() -> bytes:
    return JPEG_HEADER + b"\x00" * 64


@pytest.fixture()
def webp_bytes() -> bytes:
    return WEBP_HEADER + b"\x00" * 64


@pytest.fixture()
def exe_bytes() -> bytes:
    return EXE_HEADER + b"\x00" * 64
