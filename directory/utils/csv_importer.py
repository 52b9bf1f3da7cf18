import csv
import logging
import math
import unicodedata
from dataclasses import dataclass, field

from django.db import transaction

from directory.models import Agency, Contact

logger = logging.getLogger(__name__)

# Cuántos errores de ejemplo se guardan por importación
MAX_SAMPLE_ERRORS = 5


@dataclass
class ImportResults:
    successful: int = 0
    failed: int = 0
    errors: list = field(default_factory=list)

    def add_error(self, index, reason):
        self.failed += 1
        if len(self.errors) < MAX_SAMPLE_ERRORS:
            self.errors.append({'index': index, 'reason': reason})


def clean_value(value):
    """Normaliza un valor del CSV; vacío -> None."""
    if value is None:
        return None
    text = unicodedata.normalize('NFKC', str(value)).strip()
    return text or None


def first_of(row, *keys, default=None):
    # Primer valor no vacío entre varias columnas posibles
    for key in keys:
        value = clean_value(row.get(key))
        if value is not None:
            return value
    return default


def parse_int(value):
    value = clean_value(value)
    if value is None:
        return None
    try:
        return int(float(value.replace(',', '')))
    except (ValueError, OverflowError):
        return None


def parse_float(value):
    value = clean_value(value)
    if value is None:
        return None
    try:
        number = float(value.replace(',', ''))
    except ValueError:
        return None
    # 'inf', 'nan' o '1e400' no son datos válidos
    return number if math.isfinite(number) else None


class DirectoryCsvImporter:
    """Importa agencias y contactos desde los CSV exportados del sistema anterior"""

    @staticmethod
    def read_rows(path):
        with open(path, newline='', encoding='utf-8-sig') as fh:
            return list(csv.DictReader(fh))

    @staticmethod
    def map_agency_row(row):
        name = first_of(row, 'name', 'city', 'agency', default='Unknown')
        agency_id = first_of(row, 'id', 'agency_id', 'agencyId', default=name)
        return {
            'id': agency_id,
            'name': name,
            'type': clean_value(row.get('type')),
            'website': clean_value(row.get('website')),
            'address': first_of(row, 'physical_address', 'mailing_address'),
            'city': clean_value(row.get('city')),
            'state': clean_value(row.get('state')),
            'zip': first_of(row, 'zip', 'zip_code'),
            'phone': clean_value(row.get('phone')),
            'email': clean_value(row.get('email')),
            'population': parse_int(row.get('population')),
            'square_miles': parse_float(row.get('square_miles')),
        }

    @staticmethod
    def map_contact_row(row, agency_ids):
        # Solo se enlaza la agencia si ya existe en la base
        agency_id = clean_value(row.get('agency_id'))
        if agency_id not in agency_ids:
            agency_id = None
        return {
            'id': clean_value(row.get('id')),
            'first_name': clean_value(row.get('first_name')) or '',
            'last_name': clean_value(row.get('last_name')) or '',
            'email': clean_value(row.get('email')),
            'phone': clean_value(row.get('phone')),
            'title': clean_value(row.get('title')),
            'email_type': clean_value(row.get('email_type')),
            'contact_form_url': clean_value(row.get('contact_form_url')),
            'department': clean_value(row.get('department')),
            'agency_id': agency_id,
            'firm_id': clean_value(row.get('firm_id')),
        }

    @staticmethod
    def upsert_agency(data):
        fields = dict(data)
        agency_id = fields.pop('id')
        return Agency.objects.update_or_create(id=agency_id, defaults=fields)

    @staticmethod
    def upsert_contact(data):
        fields = dict(data)
        contact_id = fields.pop('id')
        if not contact_id:
            raise ValueError("fila sin 'id'")
        return Contact.objects.update_or_create(id=contact_id, defaults=fields)

    @staticmethod
    def process_batch(items, batch_size, process_fn, progress=None):
        """
        Procesa `items` en lotes de `batch_size`.
        Cada fila va en su propio savepoint: si falla se cuenta y se sigue.
        Retorna ImportResults con los primeros errores como muestra.
        """
        results = ImportResults()
        total = len(items)

        for start in range(0, total, batch_size):
            batch = items[start:start + batch_size]
            for offset, item in enumerate(batch):
                index = start + offset
                try:
                    with transaction.atomic():
                        process_fn(item)
                except Exception as e:
                    logger.debug("Fila %s rechazada: %s", index, e)
                    results.add_error(index, str(e))
                else:
                    results.successful += 1

            if progress:
                progress(min(start + batch_size, total), total)

        return results
