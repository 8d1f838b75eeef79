"""
Paquete services - Lógica de negocio del servicio.

Módulos por dominio:
- notification_service: Despacho y gestión de notificaciones
- identity_service: Resolución de identidad y control de rol
- assignment_saga: Vinculación agricultor -> consultor
- registration_saga: Finalización del registro de consultores
- farmer_listing: Listado de agricultores sin asignar
- repair_tasks: Registro de tareas de reparación manual

Los módulos se importan directamente (``from services.x import ...``) para
evitar ciclos con ``core.commands``.
"""
