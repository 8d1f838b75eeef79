"""Template registry: maps NotificationKind to its generator set.

The registry is populated at import time and every ``NotificationKind``
must have exactly one template; a missing or duplicated kind fails the
import instead of surfacing as ``UnknownNotificationKindError`` at runtime.
"""

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Union

from core.exceptions import UnknownNotificationKindError
from models.notifications import NotificationKind, NotificationTemplate
from templates.notifications.consultant import CONSULTANT_TEMPLATES
from templates.notifications.farmer import FARMER_TEMPLATES
from templates.notifications.security import SECURITY_TEMPLATES
from templates.notifications.system import SYSTEM_TEMPLATES

_templates: Dict[NotificationKind, NotificationTemplate] = {}

TEMPLATE_REGISTRY: Mapping[NotificationKind, NotificationTemplate] = MappingProxyType(
    _templates
)


def register_template(template: NotificationTemplate, replace: bool = False) -> None:
    """Register a template; an existing kind is only overwritten with ``replace=True``."""
    if template.kind in _templates and not replace:
        raise ValueError(f"Template already registered for: {template.kind.value}")
    _templates[template.kind] = template


def get_template(kind: Union[NotificationKind, str]) -> NotificationTemplate:
    """Look up a template by kind (enum member or its string value)."""
    try:
        key = NotificationKind(kind)
    except ValueError as exc:
        raise UnknownNotificationKindError(kind) from exc

    template = _templates.get(key)
    if template is None:
        raise UnknownNotificationKindError(kind)
    return template


def _register_all(groups: Iterable[Iterable[NotificationTemplate]]) -> None:
    for group in groups:
        for template in group:
            register_template(template)

    missing = set(NotificationKind) - set(_templates)
    if missing:
        names = ", ".join(sorted(kind.value for kind in missing))
        raise RuntimeError(f"Notification kinds without template: {names}")


_register_all(
    (CONSULTANT_TEMPLATES, FARMER_TEMPLATES, SECURITY_TEMPLATES, SYSTEM_TEMPLATES)
)

__all__ = [
    "TEMPLATE_REGISTRY",
    "get_template",
    "register_template",
]
