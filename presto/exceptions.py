"""
Erreurs métier / Domain errors.

Levées par les services, traduites en réponses HTTP par les handlers de
`presto.main`. Aucune n'est retentée : l'appelant doit corriger sa requête.
Raised by services, turned into HTTP responses by the handlers in
`presto.main`. None of them is retried internally.
"""


class PrestoError(Exception):
    """Erreur de base / Base domain error."""

    status_code = 400
    code = "ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class NotFoundError(PrestoError):
    """Ressource absente ou appartenant à un autre utilisateur / Missing or not owned."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: int | str | None = None):
        message = f"{entity} not found" if entity_id is None else f"{entity} {entity_id} not found"
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(PrestoError):
    """Entrée invalide / Malformed input (value, month, year, foreign entry...)."""

    status_code = 422
    code = "VALIDATION_ERROR"


class StateConflictError(PrestoError):
    """Opération interdite par l'état du rapport / Operation forbidden by report status."""

    status_code = 409
    code = "STATE_CONFLICT"


class DuplicateReportError(PrestoError):
    """Rapport déjà existant pour (mission, mois, année) / Report already exists."""

    status_code = 409
    code = "DUPLICATE_REPORT"


class DependencyConflictError(PrestoError):
    """Suppression bloquée par des enregistrements dépendants / Delete blocked by dependents."""

    status_code = 409
    code = "FK_CONSTRAINT"

    def __init__(self, entity: str, dependent: str, count: int):
        super().__init__(f"Cannot delete {entity}: {count} dependent {dependent}")
        self.dependent = dependent
        self.count = count


class ConversionUnavailableError(PrestoError):
    """Taux de change indisponible / Exchange rate unavailable for a currency."""

    status_code = 503
    code = "CONVERSION_UNAVAILABLE"
