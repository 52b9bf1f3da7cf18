from django.utils import timezone
from rest_framework.decorators import api_view
from rest_framework.response import Response

from usage.exceptions import StoreUnavailable
from usage.services import peek_quota


@api_view(["GET"])
def contact_quota_status(request):
    # Estado de la cuota diaria del usuario autenticado, sin consumir vistas
    try:
        quota = peek_quota(request.user.quota_key, timezone.now())
    except StoreUnavailable:
        return Response({"detail": "Quota store unavailable, try again later"}, status=503)

    return Response({
        "limit": quota.limit,
        "used": quota.view_count,
        "remaining": max(0, quota.remaining_before),
        "day": quota.day,
    })
