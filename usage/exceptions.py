class QuotaError(Exception):
    """Base de los errores de la cuota diaria de contactos."""


class StoreUnavailable(QuotaError):
    """La base de datos no respondió al leer o escribir la cuota."""


class InvalidUser(QuotaError, ValueError):
    """Identificador de usuario vacío o mal formado."""


class OverCommit(QuotaError):
    """Se intentó registrar más contactos de los que quedan en la cuota del día."""

    def __init__(self, user_id, day_key, count, view_count, limit):
        self.user_id = user_id
        self.day_key = day_key
        self.count = count
        self.view_count = view_count
        self.limit = limit
        super().__init__(
            f"user={user_id} day={day_key}: +{count} supera el límite "
            f"({view_count}/{limit} ya vistos)"
        )
