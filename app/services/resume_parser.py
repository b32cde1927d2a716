import fitz  # pymupdf

from app.core.errors import ValidationError


def parse_resume(data: bytes) -> str:
    """Extract plain text from an uploaded PDF resume."""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except (fitz.FileDataError, RuntimeError, ValueError) as e:
        raise ValidationError("Resume must be a readable PDF file") from e

    text = ""
    with doc:
        for page in doc:
            text += page.get_text()

    return text
