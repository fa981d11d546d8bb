"""
Modèles SQLAlchemy / SQLAlchemy models.
Importer tous les modèles ici pour qu'Alembic les détecte.
Import all models here so Alembic can detect them.
"""

from presto.models.user import User, UserSettings
from presto.models.company import Company
from presto.models.client import Client
from presto.models.mission import Mission
from presto.models.activity_report import ActivityReport, ReportStatus
from presto.models.report_entry import ReportEntry
from presto.models.audit import AuditLog

__all__ = [
    "User",
    "UserSettings",
    "Company",
    "Client",
    "Mission",
    "ActivityReport",
    "ReportStatus",
    "ReportEntry",
    "AuditLog",
]
