from .services import build_nav_items


def navigation(request):
    """Items de la barra de navegación, solo para usuarios autenticados."""
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return {'nav_items': []}
    return {'nav_items': build_nav_items(request.path)}
