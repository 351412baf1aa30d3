"""
PDF text extraction using LangChain PyPDFLoader.

Dependencies: langchain_community.document_loaders, tempfile
System role: Turns uploaded PDF bytes into plain text for the pipeline
"""

import logging
import os
import tempfile

from langchain_community.document_loaders import PyPDFLoader

logger = logging.getLogger(__name__)


class PdfExtractionError(Exception):
    """Raised when a PDF cannot be parsed."""


def extract_pdf_text(data: bytes) -> str:
    """
    Extract the text of every page of a PDF.

    Args:
        data: Raw PDF bytes

    Returns:
        str: Page texts joined by newlines (may be empty for scanned PDFs)

    Raises:
        PdfExtractionError: When the document cannot be parsed
    """
    fd, path = tempfile.mkstemp(suffix=".pdf")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)

        try:
            documents = PyPDFLoader(path).load()
        except Exception as e:
            raise PdfExtractionError(f"Failed to parse PDF: {e}") from e

        text = "\n".join(doc.page_content for doc in documents)
        logger.debug(f"{__name__}:extract_pdf_text - pages={len(documents)} chars={len(text)}")
        return text
    finally:
        os.unlink(path)
