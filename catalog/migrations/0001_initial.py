import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Item",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("japanese", models.CharField(max_length=200)),
                ("reading", models.CharField(blank=True, max_length=200, null=True)),
                ("meaning", models.CharField(max_length=500)),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
            ],
        ),
        migrations.CreateModel(
            name="Kanji",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("character", models.CharField(max_length=10, unique=True)),
                ("meaning", models.CharField(max_length=200)),
                ("meaning_vietnamese", models.CharField(blank=True, max_length=200, null=True)),
                ("onyomi", models.CharField(blank=True, max_length=200, null=True)),
                ("kunyomi", models.CharField(blank=True, max_length=200, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
        ),
        migrations.CreateModel(
            name="Package",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=200)),
            ],
        ),
        migrations.CreateModel(
            name="Lesson",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=200)),
                ("order", models.IntegerField(default=0)),
                (
                    "package",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lessons",
                        to="catalog.package",
                    ),
                ),
                ("items", models.ManyToManyField(blank=True, related_name="lessons", to="catalog.item")),
                ("kanjis", models.ManyToManyField(blank=True, related_name="lessons", to="catalog.kanji")),
            ],
            options={
                "ordering": ("package", "order"),
            },
        ),
    ]
