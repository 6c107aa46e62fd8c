from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ('id', 'listing', 'tourist', 'guide', 'booking_date', 'number_of_people', 'total_amount', 'status')
    list_filter = ('status', 'booking_date')
    search_fields = ('listing__title', 'tourist__email', 'guide__email')
    raw_id_fields = ('listing', 'tourist', 'guide')
    readonly_fields = ('total_amount', 'created_at', 'updated_at')
    date_hierarchy = 'booking_date'
