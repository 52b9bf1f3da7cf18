# accounts/adapter.py
from allauth.account.adapter import DefaultAccountAdapter
from django.urls import reverse


class DashboardAccountAdapter(DefaultAccountAdapter):

    def get_login_redirect_url(self, request):
        # Siempre al dashboard; allauth respeta ?next= antes de llamar a este método
        return reverse('dashboard')

    def populate_username(self, request, user):
        """
        allauth no pide username en el signup; usamos el email
        para cumplir con la restricción unique del modelo.
        """
        if not user.username:
            user.username = user.email
        return super().populate_username(request, user)
