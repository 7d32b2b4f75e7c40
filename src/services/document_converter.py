"""Conversion of word-processor documents to PDF before they are sent upstream.

The gateway accepts PDF and plain-text documents only. Word documents are
handed to a converter; a failed conversion is never fatal, the caller falls
back to forwarding the original locator.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import aiohttp

from models.config import DocumentConversionConfiguration

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Outcome of one document conversion."""

    success: bool
    pdf_base64: Optional[str] = None
    error: Optional[str] = None


class DocumentConverter(ABC):  # pylint: disable=too-few-public-methods
    """Base class for all document converter implementations."""

    @abstractmethod
    async def convert_to_pdf(self, url: str, filename: str) -> ConversionResult:
        """Convert the document found at url into a base64 encoded PDF."""


class NoopDocumentConverter(DocumentConverter):  # pylint: disable=too-few-public-methods
    """Converter used when no conversion service is configured."""

    async def convert_to_pdf(self, url: str, filename: str) -> ConversionResult:
        """Report that the document can not be converted."""
        return ConversionResult(
            success=False, error="No document conversion service configured"
        )


class HttpDocumentConverter(DocumentConverter):  # pylint: disable=too-few-public-methods
    """Converter delegating to an external HTTP conversion service.

    The service receives `{"url": ..., "filename": ...}` and answers with
    `{"pdfBase64": ...}`.
    """

    def __init__(self, config: DocumentConversionConfiguration) -> None:
        """Initialize the converter from configuration."""
        if config.url is None:
            raise ValueError("Document conversion URL is not configured")
        self.url = str(config.url)
        self.timeout = aiohttp.ClientTimeout(total=config.timeout)

    async def convert_to_pdf(self, url: str, filename: str) -> ConversionResult:
        """Convert the document using the remote service."""
        logger.info("Starting document to PDF conversion of %s", filename)
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(
                    self.url, json={"url": url, "filename": filename}
                ) as resp:
                    resp.raise_for_status()
                    body = await resp.json()
        except (aiohttp.ClientError, TimeoutError, ValueError) as e:
            logger.error("Error converting %s to PDF: %s", filename, e)
            return ConversionResult(success=False, error=str(e))

        pdf_base64 = body.get("pdfBase64") if isinstance(body, dict) else None
        if not pdf_base64:
            logger.error("Conversion service returned no PDF for %s", filename)
            return ConversionResult(success=False, error="Empty conversion result")
        return ConversionResult(success=True, pdf_base64=pdf_base64)


def get_document_converter(
    config: DocumentConversionConfiguration,
) -> DocumentConverter:
    """Return the converter matching configuration."""
    if config.url is None:
        return NoopDocumentConverter()
    return HttpDocumentConverter(config)
