from django.contrib import admin

from .models import Listing


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = ('title', 'guide', 'city', 'country', 'tour_fee', 'max_group_size', 'is_active', 'created_at')
    list_filter = ('is_active', 'country')
    search_fields = ('title', 'description', 'city', 'guide__name', 'guide__email')
    raw_id_fields = ('guide',)
    readonly_fields = ('created_at', 'updated_at')
