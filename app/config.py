"""Configuración centralizada del servicio agrifusion-api."""
import os

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuración centralizada con validación."""

    # Supabase Configuration
    supabase_url: str = os.getenv("SUPABASE_URL", "")
    # Clave pública (anon): sujeta a RLS, usada para resolver tokens
    supabase_anon_key: str = os.getenv("SUPABASE_ANON_KEY", "")
    # Clave de servicio (service role): ignora RLS, usada por las sagas
    supabase_service_key: str = os.getenv("SUPABASE_SERVICE_KEY") or os.getenv(
        "SUPABASE_SERVICE_ROLE_KEY", ""
    )
    supabase_timeout_seconds: float = float(
        os.getenv("SUPABASE_TIMEOUT_SECONDS", "5")
    )
    # Presupuesto para las escrituras de compensación
    compensation_timeout_seconds: float = float(
        os.getenv("COMPENSATION_TIMEOUT_SECONDS", "10")
    )

    # Ventana de pre-verificación de email: acepta x-user-id sin token
    allow_asserted_identity: bool = (
        os.getenv("ALLOW_ASSERTED_IDENTITY", "true").lower() == "true"
    )

    # Validación de registro
    max_location_length: int = int(os.getenv("MAX_LOCATION_LENGTH", "100"))

    # Service Port
    service_port: int = int(os.getenv("SERVICE_PORT", "8000"))
    service_name: str = "agrifusion-api"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_format: str = os.getenv("LOG_FORMAT", "json")
    perf_log_enabled: bool = True
    slow_query_threshold_ms: int = 800

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
