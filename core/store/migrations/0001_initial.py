import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("stock", models.IntegerField(default=0)),
                ("available", models.BooleanField(default=True)),
                ("category_id", models.CharField(blank=True, max_length=64, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "pos_products",
                "ordering": ["name", "id"],
            },
        ),
        migrations.CreateModel(
            name="LoyaltyCustomer",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("phone", models.CharField(blank=True, default="", max_length=64)),
                ("email", models.CharField(blank=True, default="", max_length=255)),
                ("card_number", models.CharField(max_length=32, unique=True)),
                ("points", models.IntegerField(default=0)),
                ("joined_at", models.DateTimeField()),
            ],
            options={
                "db_table": "pos_loyalty_customers",
                "ordering": ["name", "id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(points__gte=0),
                        name="ck_loyalty_customer_points_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="LoyaltyReward",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("points_required", models.PositiveIntegerField()),
                (
                    "kind",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("percentage_discount", "Percentage discount"),
                            ("free_item", "Free item"),
                        ],
                        default="",
                        max_length=32,
                    ),
                ),
                ("percent", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("active", models.BooleanField(default=True)),
            ],
            options={
                "db_table": "pos_loyalty_rewards",
                "ordering": ["points_required", "name"],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(editable=False, primary_key=True, serialize=False)),
                ("customer_name", models.CharField(max_length=255)),
                ("notes", models.TextField(blank=True, default="")),
                ("items", models.JSONField(default=list)),
                ("paid_subtotal", models.DecimalField(decimal_places=2, max_digits=12)),
                ("discount_applied", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("total", models.DecimalField(decimal_places=2, max_digits=12)),
                ("points_earned", models.IntegerField(default=0)),
                ("points_deducted", models.IntegerField(default=0)),
                ("reward_used", models.CharField(blank=True, max_length=255, null=True)),
                ("loyalty_summary", models.JSONField(default=dict)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("paid", "Paid"),
                            ("cancelled", "Cancelled"),
                            ("completed", "Completed"),
                        ],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("payment", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
                ("created_by_id", models.CharField(max_length=255)),
                ("created_by_name", models.CharField(blank=True, default="", max_length=255)),
                ("completed_by_id", models.CharField(blank=True, default="", max_length=255)),
                ("completed_by_name", models.CharField(blank=True, default="", max_length=255)),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        db_column="customer_id",
                        null=True,
                        on_delete=models.deletion.PROTECT,
                        related_name="orders",
                        to="core_store.loyaltycustomer",
                    ),
                ),
            ],
            options={
                "db_table": "pos_orders",
                "ordering": ["-created_at", "id"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="idx_order_status_created"),
                ],
            },
        ),
        migrations.CreateModel(
            name="LoyaltyPointEntry",
            fields=[
                ("seq", models.BigAutoField(primary_key=True, serialize=False)),
                ("entry_id", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ("customer_name", models.CharField(max_length=255)),
                ("points", models.IntegerField()),
                (
                    "entry_type",
                    models.CharField(
                        choices=[("earned", "Earned"), ("redeemed", "Redeemed")],
                        max_length=16,
                    ),
                ),
                ("reward_id", models.CharField(blank=True, max_length=64, null=True)),
                ("reward_name", models.CharField(blank=True, max_length=255, null=True)),
                ("processed_by", models.CharField(max_length=255)),
                ("processed_by_name", models.CharField(blank=True, default="", max_length=255)),
                ("timestamp", models.DateTimeField()),
                (
                    "customer",
                    models.ForeignKey(
                        db_column="customer_id",
                        on_delete=models.deletion.PROTECT,
                        related_name="point_entries",
                        to="core_store.loyaltycustomer",
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        db_column="order_id",
                        on_delete=models.deletion.PROTECT,
                        related_name="point_entries",
                        to="core_store.order",
                    ),
                ),
            ],
            options={
                "db_table": "pos_loyalty_point_entries",
                "ordering": ["timestamp", "seq"],
                "indexes": [
                    models.Index(fields=["customer", "timestamp"], name="idx_points_customer_ts"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ActivityLog",
            fields=[
                ("seq", models.BigAutoField(primary_key=True, serialize=False)),
                ("activity_id", models.UUIDField(editable=False, unique=True)),
                ("activity_type", models.CharField(max_length=32)),
                ("description", models.CharField(max_length=512)),
                ("user_id", models.CharField(max_length=255)),
                ("user_email", models.CharField(blank=True, default="", max_length=255)),
                ("user_name", models.CharField(blank=True, default="", max_length=255)),
                ("order_id", models.UUIDField(blank=True, null=True)),
                ("amount", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("occurred_at", models.DateTimeField()),
            ],
            options={
                "db_table": "pos_activity_log",
                "ordering": ["-occurred_at", "-seq"],
            },
        ),
    ]
