"""
Format registry: document format to encoder dispatch table.
"""

from types import MappingProxyType
from typing import Any, FrozenSet, Iterable, Mapping, Optional

from shared.logging import get_logger
from shared.errors import UnsupportedFormat
from .encoders import DocumentEncoder, JsonDocumentEncoder
from .models import DocumentFormat


class FormatRegistry:
    """Immutable mapping from DocumentFormat to its encoder.

    When several encoders claim the same format the first one registered
    wins and the others are ignored.
    """

    def __init__(self, encoders: Iterable[DocumentEncoder]):
        self.logger = get_logger("submission.format_registry")

        table = {}
        for encoder in encoders:
            document_format = encoder.document_format
            if document_format in table:
                self.logger.warning(
                    "Duplicate encoder registration ignored",
                    document_format=document_format.value,
                    kept=type(table[document_format]).__name__,
                    ignored=type(encoder).__name__
                )
                continue
            table[document_format] = encoder

        self._encoders: Mapping[DocumentFormat, DocumentEncoder] = MappingProxyType(table)

    @property
    def formats(self) -> FrozenSet[DocumentFormat]:
        return frozenset(self._encoders)

    def __contains__(self, document_format: Any) -> bool:
        try:
            return document_format in self._encoders
        except TypeError:
            return False

    def resolve(self, document_format: Any) -> DocumentEncoder:
        """Return the encoder for ``document_format``.

        Accepts a DocumentFormat or its name. Raises UnsupportedFormat when
        nothing is registered for it.
        """
        if not isinstance(document_format, DocumentFormat):
            try:
                document_format = DocumentFormat(document_format)
            except ValueError:
                raise UnsupportedFormat(document_format) from None

        encoder = self._encoders.get(document_format)
        if encoder is None:
            raise UnsupportedFormat(document_format)
        return encoder


def default_registry(product_group: Optional[str] = None) -> FormatRegistry:
    """Registry with the encoders shipped by this service."""
    return FormatRegistry([JsonDocumentEncoder(product_group=product_group)])
