# Generated migration for vouchers

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Voucher",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("customer_id", models.PositiveBigIntegerField(verbose_name="customer")),
                ("restaurant_id", models.PositiveBigIntegerField(verbose_name="restaurant")),
                ("short_code", models.CharField(max_length=16, unique=True, verbose_name="short code")),
                ("points", models.PositiveIntegerField(verbose_name="points")),
                ("value", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="value")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="created at")),
                ("is_used", models.BooleanField(default=False, verbose_name="used")),
                ("used_at", models.DateTimeField(blank=True, null=True, verbose_name="used at")),
            ],
            options={
                "verbose_name": "voucher",
                "verbose_name_plural": "vouchers",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["customer_id", "restaurant_id"], name="creditman_voucher_owner_idx"),
                ],
            },
        ),
    ]
