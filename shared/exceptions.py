class StoreError(Exception):
    """Base error for store operations. Converted to a JSON envelope by the API."""
    status_code = 500
    default_message = "Error interno"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StoreError):
    status_code = 400
    default_message = "Datos inválidos"


class NotFoundError(StoreError):
    status_code = 404
    default_message = "Recurso no encontrado"


class ConflictError(StoreError):
    status_code = 409
    default_message = "El recurso ya existe"


class PersistenceError(StoreError):
    status_code = 500
    default_message = "Error al guardar datos"
