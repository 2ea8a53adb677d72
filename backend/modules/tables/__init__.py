# backend/modules/tables/__init__.py

from .models.table_models import Table, TableConfig, TableStatus, TableShape

__all__ = [
    "Table",
    "TableConfig",
    "TableStatus",
    "TableShape",
]
