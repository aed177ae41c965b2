# Generated migration for the credit points ledger

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Restaurant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                (
                    "credit_points_buying_rate",
                    models.DecimalField(
                        decimal_places=4,
                        help_text="Points earned per unit of money spent",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="buying rate",
                    ),
                ),
                (
                    "credit_points_selling_rate",
                    models.DecimalField(
                        decimal_places=4,
                        help_text="Money value of one point (vouchers and expiry)",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="selling rate",
                    ),
                ),
                (
                    "credit_points_lifetime",
                    models.PositiveIntegerField(
                        default=365,
                        help_text="Days before unspent points expire",
                        verbose_name="points lifetime",
                    ),
                ),
                (
                    "voucher_lifetime",
                    models.PositiveIntegerField(
                        default=60,
                        help_text="Minutes before an unused voucher expires",
                        verbose_name="voucher lifetime",
                    ),
                ),
                (
                    "voucher_min_value",
                    models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="voucher minimum value"),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "restaurant",
                "verbose_name_plural": "restaurants",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("restaurant_id", models.PositiveBigIntegerField(db_index=True, verbose_name="restaurant")),
                ("first_name", models.CharField(max_length=100, verbose_name="first name")),
                ("last_name", models.CharField(blank=True, max_length=100, verbose_name="last name")),
                ("email", models.EmailField(blank=True, db_index=True, max_length=254, verbose_name="email")),
                ("phone", models.CharField(blank=True, max_length=20, verbose_name="phone")),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "customer",
                "verbose_name_plural": "customers",
                "ordering": ["first_name", "last_name"],
            },
        ),
        migrations.AddIndex(
            model_name="customer",
            index=models.Index(fields=["restaurant_id", "email"], name="creditman_customer_email_idx"),
        ),
        migrations.CreateModel(
            name="CreditPointsAccount",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("customer_id", models.PositiveBigIntegerField(verbose_name="customer")),
                ("restaurant_id", models.PositiveBigIntegerField(verbose_name="restaurant")),
                ("opened_at", models.DateTimeField(auto_now_add=True, verbose_name="opened at")),
            ],
            options={
                "verbose_name": "credit points account",
                "verbose_name_plural": "credit points accounts",
            },
        ),
        migrations.AddConstraint(
            model_name="creditpointsaccount",
            constraint=models.UniqueConstraint(
                fields=("customer_id", "restaurant_id"),
                name="creditman_account_partition_unique",
            ),
        ),
        migrations.CreateModel(
            name="CreditPointsTransaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("customer_id", models.PositiveBigIntegerField(verbose_name="customer")),
                ("restaurant_id", models.PositiveBigIntegerField(verbose_name="restaurant")),
                (
                    "kind",
                    models.CharField(
                        choices=[("earn", "Earn"), ("spend", "Spend"), ("expire", "Expire")],
                        max_length=10,
                        verbose_name="kind",
                    ),
                ),
                (
                    "points",
                    models.IntegerField(
                        help_text="Positive for earn, negative for spend/expire",
                        verbose_name="points",
                    ),
                ),
                (
                    "monetary_value",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Value at the restaurant rate in force when recorded",
                        max_digits=14,
                        verbose_name="monetary value",
                    ),
                ),
                ("occurred_at", models.DateTimeField(verbose_name="occurred at")),
                ("is_expired", models.BooleanField(default=False, verbose_name="expired")),
                (
                    "receipt_id",
                    models.CharField(
                        blank=True,
                        help_text="Purchase receipt reference (earn only)",
                        max_length=64,
                        null=True,
                        verbose_name="receipt",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "source_earn",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="drawdowns",
                        to="creditman.creditpointstransaction",
                        verbose_name="source earn transaction",
                    ),
                ),
            ],
            options={
                "verbose_name": "credit points transaction",
                "verbose_name_plural": "credit points transactions",
                "ordering": ["-id"],
            },
        ),
        migrations.AddIndex(
            model_name="creditpointstransaction",
            index=models.Index(
                fields=["customer_id", "restaurant_id", "kind", "occurred_at"],
                name="creditman_tx_partition_idx",
            ),
        ),
        migrations.AddConstraint(
            model_name="creditpointstransaction",
            constraint=models.UniqueConstraint(
                condition=models.Q(("kind", "earn")),
                fields=("receipt_id",),
                name="creditman_tx_earn_receipt_unique",
            ),
        ),
        migrations.AddConstraint(
            model_name="creditpointstransaction",
            constraint=models.CheckConstraint(
                condition=models.Q(
                    models.Q(("kind", "earn"), ("points__gt", 0), ("source_earn__isnull", True)),
                    models.Q(
                        ("kind__in", ["spend", "expire"]),
                        ("points__lt", 0),
                        ("source_earn__isnull", False),
                    ),
                    _connector="OR",
                ),
                name="creditman_tx_kind_shape",
            ),
        ),
        migrations.AddConstraint(
            model_name="creditpointstransaction",
            constraint=models.CheckConstraint(
                condition=models.Q(("is_expired", False), ("kind", "earn"), _connector="OR"),
                name="creditman_tx_only_earn_expires",
            ),
        ),
    ]
