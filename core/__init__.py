"""
Patrones centrales del servicio.

- Excepciones del dominio con su código HTTP
- Comandos (Command Pattern) con criticidad declarada
- Saga de mutaciones con compensación en orden inverso
"""

__version__ = "1.0.0"
