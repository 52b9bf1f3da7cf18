from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('accounts/', include('allauth.urls')),
    path('usage/', include('usage.urls')),
    path('', include('directory.urls')),
    path('', include('core.urls')),
]
