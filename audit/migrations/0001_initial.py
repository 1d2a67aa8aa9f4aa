from django.db import migrations, models

SNAPSHOT_KIND_CHOICES = [
    ("null", "Null"),
    ("text", "Text"),
    ("boolean", "Boolean"),
    ("integer", "Integer"),
    ("decimal", "Decimal"),
    ("float", "Float"),
    ("structured", "Structured"),
]


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ServiceEditEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("service_id", models.PositiveBigIntegerField(db_index=True)),
                ("user_id", models.PositiveBigIntegerField(db_index=True)),
                ("field_changed", models.CharField(max_length=64)),
                ("old_value", models.TextField(blank=True, null=True)),
                ("new_value", models.TextField(blank=True, null=True)),
                ("old_kind", models.CharField(choices=SNAPSHOT_KIND_CHOICES, default="null", max_length=16)),
                ("new_kind", models.CharField(choices=SNAPSHOT_KIND_CHOICES, default="null", max_length=16)),
                ("has_active_orders", models.BooleanField(default=False)),
                ("changed_at", models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                "ordering": ["-changed_at", "-id"],
                "indexes": [
                    models.Index(fields=["service_id", "changed_at"], name="audit_edit_service_idx"),
                    models.Index(fields=["user_id", "changed_at"], name="audit_edit_user_idx"),
                ],
            },
        ),
    ]
