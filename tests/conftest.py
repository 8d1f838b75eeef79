"""
Configuración global de pytest para agrifusion-api.

Este archivo contiene fixtures y configuraciones compartidas entre
todos los tests del proyecto.

Ejecutar tests con:
    pytest tests/ -v
    pytest tests/unit -v
    pytest tests/ -v -k "assignment"
"""

import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

# Agregar directorio principal al path Python
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from services.notification_service import NotificationService  # noqa: E402
from tests.fakes import InMemoryDataStore  # noqa: E402


# ========================================================================
# DATOS DE PRUEBA
# ========================================================================


def build_profile(profile_id: str, role: str, **overrides: Any) -> Dict[str, Any]:
    profile = {
        "id": profile_id,
        "auth_user_id": f"auth-{profile_id}",
        "full_name": f"User {profile_id}",
        "email": f"{profile_id.lower()}@example.com",
        "phone": None,
        "avatar_url": None,
        "role": role,
        "status": "pending",
        "is_verified": False,
    }
    profile.update(overrides)
    return profile


def build_consultant(record_id: str, profile_id: str, **overrides: Any) -> Dict[str, Any]:
    consultant = {
        "id": record_id,
        "profile_id": profile_id,
        "qualification": "MSc Agronomy",
        "specialization_areas": ["soil"],
        "experience_years": 5,
        "certificate_urls": [],
        "assigned_farmers_count": 0,
    }
    consultant.update(overrides)
    return consultant


def build_farmer(record_id: str, profile_id: str, **overrides: Any) -> Dict[str, Any]:
    farmer = {
        "id": record_id,
        "profile_id": profile_id,
        "consultant_id": None,
        "farm_name": f"Farm {record_id}",
        "district": "Nashik",
        "state": "Maharashtra",
        "land_size_acres": 4.5,
        "current_crops": ["wheat", "onion"],
        "created_at": "2024-05-01T10:00:00+00:00",
    }
    farmer.update(overrides)
    return farmer


def seed_tables(extra_consultants: int = 0) -> Dict[str, List[Dict[str, Any]]]:
    """
    Escenario base:
    - agricultor P1 sin asignar, perfil F1 (pending)
    - consultor C1, perfil CO1
    - ``extra_consultants`` consultores adicionales C2..Cn / CO2..COn
    """
    profiles = [
        build_profile("CO1", "consultant", full_name="Carla Ortiz", status="active"),
        build_profile("F1", "farmer", full_name="Pedro Farmer"),
        build_profile("B1", "buyer"),
    ]
    consultants = [build_consultant("C1", "CO1")]
    for index in range(2, extra_consultants + 2):
        profiles.append(build_profile(f"CO{index}", "consultant", status="active"))
        consultants.append(build_consultant(f"C{index}", f"CO{index}"))

    return {
        "profiles": profiles,
        "consultants": consultants,
        "farmers": [build_farmer("P1", "F1")],
        "approval_requests": [],
        "notifications": [],
        "saga_repair_tasks": [],
    }


# ========================================================================
# FIXTURES GLOBALES
# ========================================================================


@pytest.fixture
def store() -> InMemoryDataStore:
    """Almacén en memoria con el escenario base."""
    return InMemoryDataStore(seed_tables())


@pytest.fixture
def notification_service(store: InMemoryDataStore) -> NotificationService:
    return NotificationService(store)
