from django.contrib import admin

from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('id', 'listing', 'tourist', 'guide', 'rating', 'created_at')
    list_filter = ('rating',)
    search_fields = ('comment', 'listing__title', 'tourist__email', 'guide__email')
    raw_id_fields = ('booking', 'tourist', 'guide', 'listing')
    readonly_fields = ('created_at', 'updated_at')
