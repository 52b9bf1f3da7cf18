import os

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from directory.models import Agency, Contact
from directory.utils.csv_importer import DirectoryCsvImporter


class Command(BaseCommand):
    help = 'Carga agencias y contactos desde los CSV exportados (upsert por id, en lotes)'

    def add_arguments(self, parser):
        parser.add_argument('--agencies', default=settings.SEED_AGENCIES_CSV, help='CSV de agencias')
        parser.add_argument('--contacts', default=settings.SEED_CONTACTS_CSV, help='CSV de contactos')
        parser.add_argument('--batch-size', type=int, default=settings.SEED_BATCH_SIZE, help='Filas por lote')

    def handle(self, *args, **options):
        batch_size = options['batch_size']
        if batch_size < 1:
            raise CommandError('--batch-size debe ser >= 1')

        self.seed_agencies(options['agencies'], batch_size)
        self.seed_contacts(options['contacts'], batch_size)

        self.stdout.write('\n=== Seeding Summary ===')
        self.stdout.write(f'Total agencies in database: {Agency.objects.count()}')
        self.stdout.write(f'Total contacts in database: {Contact.objects.count()}')
        self.stdout.write(self.style.SUCCESS('Seeding completed'))

    def seed_agencies(self, path, batch_size):
        if not os.path.exists(path):
            self.stdout.write(self.style.WARNING('Agencies CSV not found, skipping agencies seed'))
            return

        self.stdout.write(f'Seeding agencies from {path}')
        agencies = [DirectoryCsvImporter.map_agency_row(row) for row in self._read_rows(path)]

        self.stdout.write(f'Found {len(agencies)} agencies, importing in batches...')
        results = DirectoryCsvImporter.process_batch(
            agencies, batch_size, DirectoryCsvImporter.upsert_agency, progress=self._progress
        )
        self._report('Agencies', results)

    def seed_contacts(self, path, batch_size):
        if not os.path.exists(path):
            self.stdout.write(self.style.WARNING('Contacts CSV not found, skipping contacts seed'))
            return

        self.stdout.write(f'Seeding contacts from {path}')
        agency_ids = set(Agency.objects.values_list('id', flat=True))
        self.stdout.write(f'Found {len(agency_ids)} agencies in database')

        contacts = [
            DirectoryCsvImporter.map_contact_row(row, agency_ids)
            for row in self._read_rows(path)
        ]

        self.stdout.write(f'Found {len(contacts)} contacts, importing in batches...')
        results = DirectoryCsvImporter.process_batch(
            contacts, batch_size, DirectoryCsvImporter.upsert_contact, progress=self._progress
        )
        self._report('Contacts', results)

    def _read_rows(self, path):
        try:
            return DirectoryCsvImporter.read_rows(path)
        except UnicodeDecodeError as e:
            raise CommandError(f"{path} no es un CSV UTF-8 válido: {e}") from e

    def _progress(self, done, total):
        self.stdout.write(f'  Processed {done}/{total}...')

    def _report(self, label, results):
        style = self.style.SUCCESS if not results.failed else self.style.WARNING
        self.stdout.write(style(f'{label}: {results.successful} imported, {results.failed} failed'))
        if results.errors:
            self.stdout.write('Sample errors:')
            for error in results.errors:
                self.stdout.write(f"  row {error['index']}: {error['reason']}")

# python manage.py seed_directory
# python manage.py seed_directory --agencies data/agencies.csv --contacts data/contacts.csv --batch-size 100
