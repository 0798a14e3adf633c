from .documents import (
    PDF_MEDIA_TYPE,
    AlvaraForm,
    CompanyRecord,
    RenderedDocument,
    random_barcode_text,
)

__all__ = [
    "PDF_MEDIA_TYPE",
    "AlvaraForm",
    "CompanyRecord",
    "RenderedDocument",
    "random_barcode_text",
]
