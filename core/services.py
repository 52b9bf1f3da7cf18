from django.urls import reverse


# (nombre de la ruta, etiqueta) en el orden en que se muestran
NAV_ITEMS = [
    ('dashboard', 'Dashboard'),
    ('agencies', 'Agencies'),
    ('contacts', 'Contacts'),
]


def build_nav_items(current_path):
    # Un item está activo solo si la ruta coincide exactamente
    items = []
    for url_name, label in NAV_ITEMS:
        href = reverse(url_name)
        items.append({
            'href': href,
            'label': label,
            'is_active': current_path == href,
        })
    return items
