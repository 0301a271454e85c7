import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="StudyProgress",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("user_id", models.CharField(db_index=True, max_length=64)),
                (
                    "skill",
                    models.CharField(
                        choices=[("read", "Reading"), ("write", "Writing"), ("listen", "Listening"), ("speak", "Speaking")],
                        max_length=16,
                    ),
                ),
                ("stage", models.PositiveSmallIntegerField(default=0)),
                ("last_reviewed_at", models.DateTimeField(blank=True, null=True)),
                ("next_review_at", models.DateTimeField(blank=True, null=True)),
                ("correct_streak", models.PositiveIntegerField(default=0)),
                ("wrong_count", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "item",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="progress",
                        to="catalog.item",
                    ),
                ),
                (
                    "kanji",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="progress",
                        to="catalog.kanji",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="ReviewSession",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("user_id", models.CharField(db_index=True, max_length=64)),
                ("started_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("ended_at", models.DateTimeField(blank=True, null=True)),
                ("correct_count", models.PositiveIntegerField(default=0)),
                ("total_answered", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="DifficultItemMarker",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.CharField(db_index=True, max_length=64)),
                ("note", models.CharField(blank=True, max_length=1000, null=True)),
                ("priority", models.IntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="difficult_markers",
                        to="catalog.item",
                    ),
                ),
            ],
        ),
        migrations.AddIndex(
            model_name="studyprogress",
            index=models.Index(fields=["user_id", "next_review_at"], name="idx_progress_user_due"),
        ),
        migrations.AddConstraint(
            model_name="studyprogress",
            constraint=models.UniqueConstraint(
                condition=models.Q(("kanji__isnull", True)),
                fields=("user_id", "item", "skill"),
                name="uq_progress_user_item_skill",
            ),
        ),
        migrations.AddConstraint(
            model_name="studyprogress",
            constraint=models.UniqueConstraint(
                condition=models.Q(("item__isnull", True)),
                fields=("user_id", "kanji", "skill"),
                name="uq_progress_user_kanji_skill",
            ),
        ),
        migrations.AddConstraint(
            model_name="studyprogress",
            constraint=models.CheckConstraint(
                condition=models.Q(
                    models.Q(("item__isnull", False), ("kanji__isnull", True)),
                    models.Q(("item__isnull", True), ("kanji__isnull", False)),
                    _connector="OR",
                ),
                name="ck_progress_item_xor_kanji",
            ),
        ),
        migrations.AddConstraint(
            model_name="studyprogress",
            constraint=models.CheckConstraint(
                condition=models.Q(("stage__lte", 5)),
                name="ck_progress_stage_range",
            ),
        ),
        migrations.AddIndex(
            model_name="reviewsession",
            index=models.Index(fields=["user_id", "started_at"], name="idx_session_user_start"),
        ),
        migrations.AddConstraint(
            model_name="difficultitemmarker",
            constraint=models.UniqueConstraint(fields=("user_id", "item"), name="uq_marker_user_item"),
        ),
    ]
