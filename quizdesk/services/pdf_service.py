import io
import logging

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from quizdesk.exceptions import ValidationError

logger = logging.getLogger(__name__)


def extract_text(content: bytes) -> str:
    """PDF 바이트에서 전체 텍스트 추출

    Raises:
        ValidationError: PDF를 읽을 수 없거나 추출된 텍스트가 없을 때
    """
    try:
        reader = PdfReader(io.BytesIO(content))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PdfReadError, ValueError) as e:
        logger.warning(f"PDF 파싱 실패: {e}")
        raise ValidationError("PDF 파일을 읽을 수 없습니다")

    text = "\n".join(pages).strip()
    if not text:
        raise ValidationError("PDF에서 텍스트를 추출할 수 없습니다")

    logger.debug(f"PDF 텍스트 추출: pages={len(pages)}, chars={len(text)}")
    return text
