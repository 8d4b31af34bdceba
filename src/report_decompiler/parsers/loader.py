"""Report file loading.

Reads report text out of PDF, Word, Markdown and plain text files so it
can be handed to the decompiler.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
from zipfile import BadZipFile

import pdfplumber
from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from ..models.enums import InputFormat
from .exceptions import DocumentCorruptedError, ParseError, UnsupportedFormatError


logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = {
    ".txt": InputFormat.TEXT,
    ".md": InputFormat.MARKDOWN,
    ".markdown": InputFormat.MARKDOWN,
    ".docx": InputFormat.TEXT,
    ".pdf": InputFormat.PDF_TEXT,
}


@dataclass
class LoadedText:
    """Text read from a report file."""
    text: str
    input_format: InputFormat
    filename: str
    page_count: Optional[int] = None


class DocumentLoader:
    """
    Loads report text from files.

    PDF files are validated with PyPDF2 and their text extracted with
    pdfplumber; Word documents are read paragraph by paragraph with
    python-docx; Markdown and text files are read as UTF-8.
    """

    def load(self, file_path: Union[str, Path]) -> LoadedText:
        """
        Load the text of a report file.

        Args:
            file_path: Path to a .txt, .md, .markdown, .docx or .pdf file.

        Returns:
            LoadedText with the extracted text and its input format.

        Raises:
            FileNotFoundError: If the file does not exist.
            UnsupportedFormatError: If the file type is not supported.
            DocumentCorruptedError: If a PDF or Word file cannot be opened.
            ParseError: If text extraction fails for another reason.
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        suffix = path.suffix.lower()
        if suffix not in SUPPORTED_FORMATS:
            raise UnsupportedFormatError(
                message=f"Unsupported file format: {suffix}",
                file_path=str(file_path),
                location="file extension",
                details={"supported_formats": sorted(SUPPORTED_FORMATS)},
            )

        if suffix == ".pdf":
            loaded = self._load_pdf(path)
        elif suffix == ".docx":
            loaded = self._load_docx(path)
        else:
            loaded = self._load_plain(path, SUPPORTED_FORMATS[suffix])

        logger.info(f"Loaded {len(loaded.text)} characters from {path.name}")
        return loaded

    def get_supported_formats(self) -> list[str]:
        """Return list of supported file formats."""
        return sorted(SUPPORTED_FORMATS)

    def _load_plain(self, path: Path, input_format: InputFormat) -> LoadedText:
        try:
            text = path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(
                message="File is not valid UTF-8 text",
                file_path=str(path),
                location=f"byte {e.start}",
                details={"original_error": str(e)},
            )
        return LoadedText(text=text, input_format=input_format, filename=path.name)

    def _load_docx(self, path: Path) -> LoadedText:
        try:
            document = Document(str(path))
        except (PackageNotFoundError, BadZipFile, KeyError) as e:
            raise DocumentCorruptedError(
                message="Word document is corrupted or unreadable",
                file_path=str(path),
                location="file header",
                details={"original_error": str(e)},
            )

        lines = [paragraph.text for paragraph in document.paragraphs]
        for table in document.tables:
            for row in table.rows:
                lines.append(" | ".join(cell.text.strip() for cell in row.cells))

        return LoadedText(
            text="\n".join(lines),
            input_format=InputFormat.TEXT,
            filename=path.name,
        )

    def _load_pdf(self, path: Path) -> LoadedText:
        try:
            page_count = len(PdfReader(str(path)).pages)
        except PdfReadError as e:
            raise DocumentCorruptedError(
                message="PDF file is corrupted or encrypted",
                file_path=str(path),
                location="file header",
                details={"original_error": str(e)},
            )
        except Exception as e:
            raise ParseError(
                message=f"Failed to open PDF: {str(e)}",
                file_path=str(path),
                details={"original_error": str(e)},
            )

        try:
            with pdfplumber.open(str(path)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as e:
            raise ParseError(
                message=f"Failed to extract PDF text: {str(e)}",
                file_path=str(path),
                details={"original_error": str(e)},
            )

        return LoadedText(
            text="\n\n".join(page for page in pages if page),
            input_format=InputFormat.PDF_TEXT,
            filename=path.name,
            page_count=page_count,
        )
