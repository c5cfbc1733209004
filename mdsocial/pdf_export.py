from __future__ import annotations

from pathlib import Path
from typing import Sequence

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

POINTS_PER_PIXEL = 72.0 / 96.0


def export_pages_to_pdf(
    image_paths: Sequence[Path],
    output_path: Path,
    debug: bool = False,
) -> Path:
    """Bundle rendered pages into a single PDF, one image per PDF page."""
    if not image_paths:
        raise ValueError("No rendered pages to export.")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    pdf = canvas.Canvas(str(output_path))

    for image_path in image_paths:
        with Image.open(image_path) as image:
            width_px, height_px = image.size
        page_size = (width_px * POINTS_PER_PIXEL, height_px * POINTS_PER_PIXEL)
        pdf.setPageSize(page_size)
        pdf.drawImage(
            ImageReader(str(image_path)),
            0,
            0,
            width=page_size[0],
            height=page_size[1],
        )
        pdf.showPage()
        if debug:
            print(f"[DEBUG] Added {image_path} to {output_path.name}")

    pdf.save()
    return output_path
