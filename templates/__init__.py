"""Textos y plantillas reutilizables del servicio.

Este paquete centraliza las plantillas de notificación organizadas por dominio.
"""

from templates.notifications import (
    TEMPLATE_REGISTRY,
    get_template,
    register_template,
)

__all__ = [
    "TEMPLATE_REGISTRY",
    "get_template",
    "register_template",
]
