from django.contrib import admin
from .models import Quote, QuoteLine


class QuoteLineInline(admin.TabularInline):
    model = QuoteLine
    extra = 0
    raw_id_fields = ['product']
    readonly_fields = [
        'quote_unit_price', 'final_unit_price', 'subtotal_before_row_discounts',
        'final_subtotal', 'vat_on_subtotal', 'gross_subtotal'
    ]


@admin.register(Quote)
class QuoteAdmin(admin.ModelAdmin):
    list_display = ['name', 'customer_name', 'quote_expiration_date', 'net_grand_total', 'gross_grand_total', 'company']
    list_filter = ['company']
    search_fields = ['name', 'customer_name']
    raw_id_fields = ['customer', 'seller_user', 'created_by']
    readonly_fields = ['net_grand_total', 'gross_grand_total', 'created_date']
    inlines = [QuoteLineInline]
