"""Capa HTTP del servicio: configuración, dependencias y routers."""
