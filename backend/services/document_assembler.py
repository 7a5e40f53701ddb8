import io
import logging
from typing import Sequence

import img2pdf
from PIL import Image

from services.errors import AssemblyFailure
from services.models import Document, DocumentPage, OutputMode, RasterFrame

# 로깅 설정
logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
JPEG_CONTENT_TYPE = "image/jpeg"

# 72 dpi makes one PDF point equal to one raster pixel
PDF_RESOLUTION = 72.0


class DocumentAssembler:
    def __init__(self, pdf_filename: str = "capture.pdf", image_filename: str = "capture.jpg"):
        self.pdf_filename = pdf_filename
        self.image_filename = image_filename

    def assemble(self, frames: Sequence[RasterFrame], mode: OutputMode) -> Document:
        """
        Frame sequence -> Document

        Args:
            frames: RasterFrames from one capture run
            mode: PAGINATED_DOCUMENT builds a PDF, one page per frame;
                  SINGLE_IMAGE passes the one frame through as JPEG

        Raises:
            AssemblyFailure: no frames, or more than one frame in image mode
        """
        if not frames:
            raise AssemblyFailure("Cannot assemble a document from zero frames")

        if mode == OutputMode.SINGLE_IMAGE:
            return self._single_image(frames)
        return self._paginated(frames)

    def _single_image(self, frames: Sequence[RasterFrame]) -> Document:
        if len(frames) != 1:
            raise AssemblyFailure(f"Single image mode expects exactly one frame, got {len(frames)}")
        frame = frames[0]
        return Document(
            mode=OutputMode.SINGLE_IMAGE,
            pages=(DocumentPage(frame.width, frame.height, frame.image_bytes),),
            data=frame.image_bytes,
            content_type=JPEG_CONTENT_TYPE,
            filename=self.image_filename,
        )

    def _paginated(self, frames: Sequence[RasterFrame]) -> Document:
        ordered = sorted(frames, key=lambda f: f.sequence_index)

        for frame in ordered:
            try:
                with Image.open(io.BytesIO(frame.image_bytes)) as img:
                    img.load()
            except Exception as e:
                raise AssemblyFailure(f"Frame {frame.sequence_index} is not a readable image: {e}") from e

        # 페이지 크기 = 캡처 크기 (스케일링 없음), JPEG 스트림은 재인코딩 없이 그대로 삽입
        layout = img2pdf.get_fixed_dpi_layout_fun((PDF_RESOLUTION, PDF_RESOLUTION))
        try:
            data = img2pdf.convert([f.image_bytes for f in ordered], layout_fun=layout)
        except Exception as e:
            raise AssemblyFailure(f"Failed to write PDF: {e}") from e

        pages = tuple(DocumentPage(f.width, f.height, f.image_bytes) for f in ordered)
        logger.info(f"Assembled PDF with {len(pages)} page(s)")
        return Document(
            mode=OutputMode.PAGINATED_DOCUMENT,
            pages=pages,
            data=data,
            content_type=PDF_CONTENT_TYPE,
            filename=self.pdf_filename,
        )


def assemble(frames: Sequence[RasterFrame], mode: OutputMode) -> Document:
    return DocumentAssembler().assemble(frames, mode)
