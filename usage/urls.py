from django.urls import path
from .views import contact_quota_status

urlpatterns = [
    path('contacts/', contact_quota_status, name='contact_quota_status'),
]
