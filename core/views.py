from django.shortcuts import render
from django.contrib.auth.decorators import login_required
from django.utils import timezone

from directory.models import Agency, Contact
from usage.exceptions import StoreUnavailable
from usage.services import peek_quota

import logging
logger = logging.getLogger(__name__)


def index_view(request):
    """Landing: hero para anónimos, bienvenida para usuarios autenticados"""
    return render(request, 'core/index.html')


@login_required
def dashboard(request):
    context = {
        'agency_count': Agency.objects.count(),
        'contact_count': Contact.objects.reachable().count(),
        'quota': None,
    }
    try:
        context['quota'] = peek_quota(request.user.quota_key, timezone.now())
    except StoreUnavailable:
        # El resto del dashboard sigue siendo útil sin el estado de la cuota
        logger.warning("Estado de cuota no disponible para user=%s", request.user.pk)
    return render(request, 'core/dashboard.html', context)
