from django.shortcuts import render
from django.contrib.auth.decorators import login_required
from django.utils import timezone

from usage.exceptions import StoreUnavailable
from usage.services import reveal_contacts
from .models import Agency, Contact

import logging
logger = logging.getLogger(__name__)


@login_required
def agencies_list(request):
    agencies = Agency.objects.order_by('name')
    return render(request, 'directory/agencies.html', {'agencies': agencies})


@login_required
def contacts_list(request):
    try:
        result = reveal_contacts(request.user.quota_key, timezone.now(), Contact.objects.reachable())
    except StoreUnavailable:
        # Sin la cuota no se muestra nada: nunca conceder vistas ilimitadas
        logger.exception("No se pudo aplicar la cuota de contactos para user=%s", request.user.pk)
        return render(request, 'errors/store_unavailable.html', status=503)

    if result.exhausted:
        return render(request, 'usage/upgrade_prompt.html', {'limit': result.limit})

    return render(request, 'directory/contacts.html', {'result': result, 'contacts': result.contacts})
