from django.contrib import admin
from apps.groups.models import Group, Product, GroupStatus


class ProductInline(admin.TabularInline):
    """Inline admin for the group's menu."""
    model = Product
    extra = 0
    fields = ['name', 'price', 'updated_at']
    readonly_fields = ['updated_at']


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    """Admin interface for Groups."""

    list_display = [
        'title',
        'creator',
        'status',
        'member_count',
        'start_time',
        'end_time',
        'created_at'
    ]
    list_filter = ['status', 'created_at']
    search_fields = ['title', 'creator__username', 'creator__name']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [ProductInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('title', 'creator', 'status')
        }),
        ('Ordering Window', {
            'fields': ('start_time', 'end_time')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def member_count(self, obj):
        """Show number of members holding an order."""
        return obj.orders.count()
    member_count.short_description = 'Members'

    actions = ['close_groups', 'open_groups']

    def close_groups(self, request, queryset):
        updated = queryset.update(status=GroupStatus.CLOSED)
        self.message_user(request, f"Closed {updated} groups")
    close_groups.short_description = "Close selected groups"

    def open_groups(self, request, queryset):
        updated = queryset.update(status=GroupStatus.OPEN)
        self.message_user(request, f"Opened {updated} groups")
    open_groups.short_description = "Open selected groups"

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('creator')
