from django.urls import path
from .views import agencies_list, contacts_list

urlpatterns = [
    path('agencies/', agencies_list, name='agencies'),
    path('contacts/', contacts_list, name='contacts'),
]
