from django.contrib import admin
from .models import Agency, Contact


@admin.register(Agency)
class AgencyAdmin(admin.ModelAdmin):
    list_display = ('name', 'type', 'city', 'state', 'population')
    list_filter = ('state', 'type')
    search_fields = ('id', 'name', 'city')


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    list_display = ('last_name', 'first_name', 'title', 'email', 'phone', 'agency')
    list_filter = ('email_type',)
    search_fields = ('id', 'first_name', 'last_name', 'email', 'department')
    raw_id_fields = ('agency',)
