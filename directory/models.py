from django.db import models
from django.db.models import Q

from core.models import TimeStampedModel


class Agency(TimeStampedModel):
    # El id viene del CSV de origen; si falta se usa el nombre
    id = models.CharField(max_length=255, primary_key=True)
    name = models.CharField(max_length=255, db_index=True)
    type = models.CharField(max_length=100, null=True, blank=True)
    website = models.URLField(max_length=500, null=True, blank=True)
    address = models.CharField(max_length=500, null=True, blank=True)
    city = models.CharField(max_length=150, null=True, blank=True)
    state = models.CharField(max_length=50, null=True, blank=True)
    zip = models.CharField(max_length=20, null=True, blank=True)
    phone = models.CharField(max_length=50, null=True, blank=True)
    email = models.EmailField(max_length=254, null=True, blank=True)
    population = models.PositiveIntegerField(null=True, blank=True)
    square_miles = models.FloatField(null=True, blank=True)

    class Meta:
        ordering = ['name']
        verbose_name = "Agency"
        verbose_name_plural = "Agencies"

    def __str__(self):
        return self.name


class ContactQuerySet(models.QuerySet):

    def reachable(self):
        # Solo cuentan los contactos con email o teléfono
        return self.filter(
            (Q(email__isnull=False) & ~Q(email='')) | (Q(phone__isnull=False) & ~Q(phone=''))
        )


class Contact(TimeStampedModel):
    id = models.CharField(max_length=255, primary_key=True)
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True, db_index=True)
    email = models.EmailField(max_length=254, null=True, blank=True)
    phone = models.CharField(max_length=50, null=True, blank=True)
    title = models.CharField(max_length=255, null=True, blank=True)
    email_type = models.CharField(max_length=50, null=True, blank=True)
    contact_form_url = models.URLField(max_length=500, null=True, blank=True)
    department = models.CharField(max_length=255, null=True, blank=True)
    agency = models.ForeignKey(
        Agency,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='contacts',
        verbose_name='Agency',
    )
    firm_id = models.CharField(max_length=255, null=True, blank=True)

    objects = ContactQuerySet.as_manager()

    class Meta:
        verbose_name = "Contact"
        verbose_name_plural = "Contacts"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self):
        return self.full_name or self.id
