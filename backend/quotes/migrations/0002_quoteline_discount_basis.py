# Generated manually for quote line discount basis

from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('quotes', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='quoteline',
            name='unit_price_discount_basis',
            field=models.CharField(blank=True, choices=[('percent', 'Percent'), ('amount', 'Amount')], max_length=10),
        ),
        migrations.AddField(
            model_name='quoteline',
            name='subtotal_discount_basis',
            field=models.CharField(blank=True, choices=[('percent', 'Percent'), ('amount', 'Amount')], max_length=10),
        ),
    ]
