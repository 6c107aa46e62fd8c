from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('email', 'name', 'role', 'city', 'is_verified', 'is_active', 'created_at')
    list_filter = ('role', 'is_active', 'is_verified')
    search_fields = ('email', 'name', 'city')
    ordering = ('-created_at',)
    readonly_fields = ('created_at', 'updated_at', 'last_login')

    fieldsets = (
        (None, {'fields': ('email', 'password', 'role')}),
        ('Profile', {'fields': ('name', 'profile_pic', 'bio', 'phone', 'languages')}),
        ('Guide', {'fields': ('expertise', 'daily_rate', 'city', 'country')}),
        ('Tourist', {'fields': ('travel_preferences',)}),
        ('Status', {'fields': ('is_verified', 'is_active', 'is_staff', 'is_superuser')}),
        ('Dates', {'fields': ('last_login', 'created_at', 'updated_at')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'password1', 'password2'),
        }),
    )
    filter_horizontal = ()
