"""Domain layer for freelancedesk application."""

# Services import the database layer, which itself imports domain.entities,
# so they are loaded lazily.
_SERVICES = {
    "ClientService": "freelancedesk.domain.client",
    "ProjectService": "freelancedesk.domain.project",
    "TaskService": "freelancedesk.domain.task",
    "InvoiceService": "freelancedesk.domain.invoice",
    "ExpenseService": "freelancedesk.domain.expense",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
