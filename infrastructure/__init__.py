"""Infraestructura: acceso a Supabase y logging estructurado."""
