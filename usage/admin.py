from django.contrib import admin
from .models import ContactViewQuota

@admin.register(ContactViewQuota)
class ContactViewQuotaAdmin(admin.ModelAdmin):
    list_display = ('user_id', 'view_date', 'view_count')
    list_filter = ('view_date',)
    search_fields = ('user_id',)
