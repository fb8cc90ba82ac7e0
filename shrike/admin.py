from django.contrib import admin

from .models import AppSettings, BackupEntry


@admin.register(BackupEntry)
class BackupEntryAdmin(admin.ModelAdmin):
    list_display = ["path", "item_type", "added_at", "last_synced"]
    list_filter = ["item_type"]
    search_fields = ["path"]
    readonly_fields = ["added_at", "last_synced"]


@admin.register(AppSettings)
class AppSettingsAdmin(admin.ModelAdmin):
    list_display = ["__str__", "backup_dir_name", "machine_name", "webhook_port", "updated_at"]
    readonly_fields = ["updated_at"]

    def has_add_permission(self, request):
        # Single row, created by AppSettings.load()
        return not AppSettings.objects.exists()
