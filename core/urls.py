from django.urls import path
from .views import index_view, dashboard

urlpatterns = [
    path('', index_view, name='index'),
    path('dashboard/', dashboard, name='dashboard'),
]
