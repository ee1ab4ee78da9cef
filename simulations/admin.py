from django.contrib import admin
from .models import Simulation


@admin.register(Simulation)
class SimulationAdmin(admin.ModelAdmin):
    """
    Admin configuration for Simulation model. Presets cannot be edited once saved.
    """
    list_display = ['id', 'name', 'mapping_a', 'mapping_c', 'mapping_g', 'mapping_t', 'created_at']
    search_fields = ['name', 'text_input']
    ordering = ['created_at', 'id']
    readonly_fields = ['created_at']

    fieldsets = (
        ('Preset', {
            'fields': ('name', 'text_input')
        }),
        ('Base Mapping', {
            'fields': ('mapping_a', 'mapping_c', 'mapping_g', 'mapping_t')
        }),
        ('Metadata', {
            'fields': ('created_at',),
            'classes': ('collapse',)
        }),
    )

    def has_change_permission(self, request, obj=None):
        return False
