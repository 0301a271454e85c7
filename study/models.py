import uuid

from django.db import models
from django.db.models import Q
from django.utils import timezone

from .scheduling import MAX_STAGE, ReviewState
from .units import UnitRef


class Skill(models.TextChoices):
    READ = "read", "Reading"
    WRITE = "write", "Writing"
    LISTEN = "listen", "Listening"
    SPEAK = "speak", "Speaking"


class StudyProgress(models.Model):
    """SRS state of one unit (item XOR kanji) for one user and skill."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(max_length=64, db_index=True)           # Opaque user identifier
    item = models.ForeignKey(
        "catalog.Item", null=True, blank=True, on_delete=models.CASCADE, related_name="progress"
    )
    kanji = models.ForeignKey(
        "catalog.Kanji", null=True, blank=True, on_delete=models.CASCADE, related_name="progress"
    )
    skill = models.CharField(max_length=16, choices=Skill.choices)
    stage = models.PositiveSmallIntegerField(default=0)                 # 0..MAX_STAGE
    last_reviewed_at = models.DateTimeField(null=True, blank=True)
    next_review_at = models.DateTimeField(null=True, blank=True)         # NULL = due immediately
    correct_streak = models.PositiveIntegerField(default=0)
    wrong_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user_id", "item", "skill"],
                                    condition=Q(kanji__isnull=True),
                                    name="uq_progress_user_item_skill"),
            models.UniqueConstraint(fields=["user_id", "kanji", "skill"],
                                    condition=Q(item__isnull=True),
                                    name="uq_progress_user_kanji_skill"),
            models.CheckConstraint(condition=(Q(item__isnull=False, kanji__isnull=True)
                                              | Q(item__isnull=True, kanji__isnull=False)),
                                   name="ck_progress_item_xor_kanji"),
            models.CheckConstraint(condition=Q(stage__lte=MAX_STAGE),
                                   name="ck_progress_stage_range"),
            models.CheckConstraint(condition=Q(skill__in=Skill.values),
                                   name="ck_progress_skill"),
        ]
        indexes = [
            models.Index(fields=["user_id", "next_review_at"], name="idx_progress_user_due"),
        ]

    def __str__(self):
        return f"{self.user_id}:{self.unit.kind.value}:{self.unit.id}:{self.skill} -> {self.stage}"

    @property
    def unit(self) -> UnitRef:
        if self.item_id is not None:
            return UnitRef.item(self.item_id)
        return UnitRef.kanji(self.kanji_id)

    @property
    def review_state(self) -> ReviewState:
        return ReviewState(
            stage=self.stage,
            correct_streak=self.correct_streak,
            wrong_count=self.wrong_count,
            last_reviewed_at=self.last_reviewed_at,
            next_review_at=self.next_review_at,
        )

    def apply_state(self, state: ReviewState) -> None:
        self.stage = state.stage
        self.correct_streak = state.correct_streak
        self.wrong_count = state.wrong_count
        self.last_reviewed_at = state.last_reviewed_at
        self.next_review_at = state.next_review_at


class ReviewSession(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(max_length=64, db_index=True)
    started_at = models.DateTimeField(default=timezone.now)
    ended_at = models.DateTimeField(null=True, blank=True)              # NULL while active
    correct_count = models.PositiveIntegerField(default=0)
    total_answered = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["user_id", "started_at"], name="idx_session_user_start"),
        ]


class DifficultItemMarker(models.Model):
    """Item a user flagged as difficult; only affects dashboard surfacing."""
    user_id = models.CharField(max_length=64, db_index=True)
    item = models.ForeignKey("catalog.Item", on_delete=models.CASCADE, related_name="difficult_markers")
    note = models.CharField(max_length=1000, null=True, blank=True)
    priority = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user_id", "item"], name="uq_marker_user_item"),
        ]
