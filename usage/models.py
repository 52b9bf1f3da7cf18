from django.db import models


class ContactViewQuota(models.Model):
    # Identificador opaco del usuario autenticado (no FK: la identidad la resuelve el proveedor)
    user_id = models.CharField(max_length=255)
    view_date = models.DateField()
    view_count = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = "Contact view quota"
        verbose_name_plural = "Contact view quotas"
        constraints = [
            models.UniqueConstraint(fields=['user_id', 'view_date'], name='usage_unique_user_view_date'),
        ]

    def __str__(self):
        return f"{self.user_id} - {self.view_date:%Y-%m-%d} ({self.view_count})"
