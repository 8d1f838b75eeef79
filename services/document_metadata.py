"""
Categorización de documentos de registro de consultores.

Cada referencia de documento se compara contra un conjunto fijo de marcadores
de categoría. Por cada categoría se conserva la primera referencia que la
contiene; las referencias que no coinciden con ninguna categoría se omiten
de la metadata (aunque siguen guardadas en ``consultants.certificate_urls``).
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, Optional

from models.profiles import SubmittedDocuments

DOCUMENT_CATEGORIES = ("educational", "professional", "experience", "government")


def categorize_documents(document_urls: Iterable[str]) -> Dict[str, str]:
    """Retorna ``{categoria: primera_url_que_la_contiene}`` para las categorías encontradas."""
    urls = [url for url in document_urls if isinstance(url, str)]
    categorized: Dict[str, str] = {}
    for category in DOCUMENT_CATEGORIES:
        match = next((url for url in urls if category in url), None)
        if match is not None:
            categorized[category] = match
    return categorized


def build_submitted_documents(
    document_urls: Iterable[str], submitted_at: Optional[datetime] = None
) -> SubmittedDocuments:
    """Construye la metadata de la solicitud de revisión con su sello de envío."""
    return SubmittedDocuments(
        **categorize_documents(document_urls),
        submitted_at=submitted_at or datetime.now(timezone.utc),
    )
