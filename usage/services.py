# Cuota diaria de contactos
# Si el código calcula, decide o filtra va aquí; el render queda en las vistas.
#
# El "día" se calcula siempre a partir de un `now` que entrega quien llama,
# convertido a settings.QUOTA_TIME_ZONE. Nunca se lee el reloj aquí dentro.

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from zoneinfo import ZoneInfo

from django.conf import settings
from django.db import InterfaceError, OperationalError, transaction
from django.db.models import F
from django.utils import timezone

from usage.exceptions import InvalidUser, OverCommit, StoreUnavailable
from usage.models import ContactViewQuota

logger = logging.getLogger(__name__)

USER_ID_MAX_LENGTH = 255


@dataclass(frozen=True)
class QuotaCheck:
    remaining_before: int
    day_key: date
    view_count: int
    limit: int

    @property
    def exhausted(self):
        return self.remaining_before <= 0

    @property
    def day(self):
        return self.day_key.isoformat()


@dataclass
class RevealResult:
    day_key: date
    limit: int
    contacts: list = field(default_factory=list)
    viewed_today: int = 0
    remaining: int = 0
    total: int = 0
    has_more: bool = False
    exhausted: bool = False

    @property
    def revealed(self):
        return len(self.contacts)

    @property
    def pending(self):
        # Contactos que aún no se han mostrado hoy
        return max(0, self.total - self.viewed_today)

    @property
    def next_batch(self):
        return min(self.remaining, self.pending)


def get_daily_limit():
    return int(getattr(settings, 'CONTACT_DAILY_VIEW_LIMIT', 50))


def day_key_for(now):
    """Fecha (día de cuota) de `now` en la zona horaria configurada."""
    if timezone.is_naive(now):
        raise ValueError("`now` debe incluir zona horaria")
    tz = ZoneInfo(getattr(settings, 'QUOTA_TIME_ZONE', 'UTC'))
    return timezone.localtime(now, tz).date()


def validate_user_id(user_id):
    if not isinstance(user_id, str):
        raise InvalidUser(f"user_id debe ser str, no {type(user_id).__name__}")
    if not user_id or user_id.strip() != user_id:
        raise InvalidUser(f"user_id inválido: {user_id!r}")
    if len(user_id) > USER_ID_MAX_LENGTH:
        raise InvalidUser(f"user_id supera {USER_ID_MAX_LENGTH} caracteres")
    return user_id


@contextmanager
def _store_errors(action, user_id):
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        logger.warning("Cuota no disponible (%s) para user=%s: %s", action, user_id, e)
        raise StoreUnavailable(f"No se pudo {action} la cuota de {user_id}") from e


def check_and_reserve(user_id, now):
    """
    Asegura que exista el registro del día (view_count=0 si es nuevo)
    y devuelve cuántos contactos puede ver todavía el usuario.
    No modifica el contador.
    """
    user_id = validate_user_id(user_id)
    day_key = day_key_for(now)
    limit = get_daily_limit()

    with _store_errors('leer', user_id):
        # get_or_create se apoya en el unique (user_id, view_date) si hay carrera al crear
        quota, created = ContactViewQuota.objects.get_or_create(
            user_id=user_id,
            view_date=day_key,
            defaults={'view_count': 0},
        )

    if created:
        logger.debug("Nuevo registro de cuota user=%s day=%s", user_id, day_key)

    return QuotaCheck(
        remaining_before=limit - quota.view_count,
        day_key=day_key,
        view_count=quota.view_count,
        limit=limit,
    )


def commit_reveal(user_id, day_key, count):
    """
    Suma `count` contactos vistos al registro del día y devuelve el nuevo total.

    El incremento es un UPDATE condicional (view_count + count <= límite):
    view_count nunca supera el límite, ni con peticiones concurrentes.
    Si la condición no se cumple se lanza OverCommit; `count` no se recorta.
    """
    user_id = validate_user_id(user_id)
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise ValueError(f"count debe ser un entero >= 0, no {count!r}")
    limit = get_daily_limit()

    with _store_errors('actualizar', user_id):
        with transaction.atomic():
            qs = ContactViewQuota.objects.filter(user_id=user_id, view_date=day_key)
            ceiling = limit - count
            if count == 0:
                updated = 1
            elif ceiling < 0:
                updated = 0
            else:
                updated = qs.filter(view_count__lte=ceiling).update(
                    view_count=F('view_count') + count
                )
            view_count = qs.values_list('view_count', flat=True).first()

    if view_count is None:
        raise ContactViewQuota.DoesNotExist(
            f"No hay registro de cuota para user={user_id} day={day_key}; llamar antes a check_and_reserve"
        )
    if not updated:
        logger.warning("OverCommit user=%s day=%s: +%s con %s/%s", user_id, day_key, count, view_count, limit)
        raise OverCommit(user_id, day_key, count, view_count, limit)

    if count and view_count >= limit:
        logger.info("user=%s alcanzó el límite diario (%s) el %s", user_id, limit, day_key)
    return view_count


def peek_quota(user_id, now):
    """Estado de la cuota sin crear ni tocar registros (dashboard y API)."""
    user_id = validate_user_id(user_id)
    day_key = day_key_for(now)
    limit = get_daily_limit()

    with _store_errors('leer', user_id):
        view_count = (
            ContactViewQuota.objects
            .filter(user_id=user_id, view_date=day_key)
            .values_list('view_count', flat=True)
            .first()
        ) or 0

    return QuotaCheck(
        remaining_before=limit - view_count,
        day_key=day_key,
        view_count=view_count,
        limit=limit,
    )


def reveal_contacts(user_id, now, queryset, max_attempts=2):
    """
    Política de la página de contactos:
      1. consulta la cuota del día
      2. si está agotada no se consultan contactos
      3. si no, toma los siguientes min(restantes, disponibles) por apellido
         y registra exactamente cuántos se muestran
    Si otra petición concurrente consumió la cuota entre 1 y 3 (OverCommit)
    se repite una vez con el contador actualizado.
    """
    ordered = queryset.order_by('last_name', 'first_name', 'id')

    for attempt in range(1, max_attempts + 1):
        check = check_and_reserve(user_id, now)
        if check.exhausted:
            return RevealResult(
                day_key=check.day_key,
                limit=check.limit,
                viewed_today=check.view_count,
                remaining=0,
                exhausted=True,
            )

        # Se continúa después de los ya vistos hoy, así "Load more" muestra contactos nuevos.
        # Supone que el directorio no cambia durante el día: un seed a mitad de día desplaza el offset.
        with _store_errors('leer', user_id):
            total = ordered.count()
            offset = min(check.view_count, total)
            contacts = list(ordered[offset:offset + check.remaining_before])

        try:
            view_count = commit_reveal(user_id, check.day_key, len(contacts))
        except OverCommit:
            if attempt == max_attempts:
                raise
            logger.info("Reintentando reveal para user=%s tras OverCommit (intento %s)", user_id, attempt)
            continue

        return RevealResult(
            day_key=check.day_key,
            limit=check.limit,
            contacts=contacts,
            viewed_today=view_count,
            remaining=max(0, check.limit - view_count),
            total=total,
            has_more=total > view_count,
        )
