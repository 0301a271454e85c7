# study/serializers.py
import datetime as dt

from django.utils import timezone
from rest_framework import serializers

from .models import DifficultItemMarker, ReviewSession, Skill, StudyProgress
from .units import UnitRef


class AwareDateTimeField(serializers.DateTimeField):
    """
    Datetime field that ensures tz-aware UTC datetimes.
    - Accepts ISO strings with/without timezone; if naive → assume UTC.
    - Always outputs ISO in UTC (Z).
    """
    def to_internal_value(self, value):
        d = super().to_internal_value(value)
        if d is None:
            return None
        if timezone.is_naive(d):
            d = timezone.make_aware(d, dt.timezone.utc)
        return d.astimezone(dt.timezone.utc)

    def to_representation(self, value):
        if value is None:
            return None
        if timezone.is_naive(value):
            value = timezone.make_aware(value, dt.timezone.utc)
        return super().to_representation(value.astimezone(dt.timezone.utc))


# ---- Requests ----

class QueueQuerySerializer(serializers.Serializer):
    """Query string of GET /study/queue. limit is clamped by the engine, not rejected."""
    skill = serializers.ChoiceField(choices=Skill.choices, required=False)
    limit = serializers.IntegerField(required=False)


class QueueByLessonsSerializer(serializers.Serializer):
    # An empty list reaches the engine, which rejects it as InvalidRequest.
    lesson_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=True)
    skill = serializers.ChoiceField(choices=Skill.choices, required=False, allow_null=True)
    limit = serializers.IntegerField(required=False)
    include_items = serializers.BooleanField(default=True)
    include_kanjis = serializers.BooleanField(default=False)


class QueueByPackageSerializer(serializers.Serializer):
    package_id = serializers.UUIDField()
    lesson_ids = serializers.ListField(
        child=serializers.UUIDField(), required=False, allow_empty=True, allow_null=True
    )
    skill = serializers.ChoiceField(choices=Skill.choices, required=False, allow_null=True)
    limit = serializers.IntegerField(required=False)
    include_items = serializers.BooleanField(default=True)
    include_kanjis = serializers.BooleanField(default=False)


class AnswerSerializer(serializers.Serializer):
    """
    Answer submission.
    Exactly one of item_id / kanji_id identifies the unit; it is exposed as `unit`.
    """
    item_id = serializers.UUIDField(required=False, allow_null=True)
    kanji_id = serializers.UUIDField(required=False, allow_null=True)
    skill = serializers.ChoiceField(choices=Skill.choices)
    is_correct = serializers.BooleanField()
    session_id = serializers.UUIDField(required=False, allow_null=True)

    def validate(self, attrs):
        try:
            attrs["unit"] = UnitRef.from_ids(attrs.get("item_id"), attrs.get("kanji_id"))
        except ValueError as e:
            raise serializers.ValidationError(str(e))
        return attrs


class EndSessionSerializer(serializers.Serializer):
    correct_count = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    total_answered = serializers.IntegerField(required=False, allow_null=True, min_value=0)


class DashboardQuerySerializer(serializers.Serializer):
    skill = serializers.ChoiceField(choices=Skill.choices, required=False)
    tz = serializers.CharField(required=False, default="UTC")


class MarkDifficultSerializer(serializers.Serializer):
    priority = serializers.IntegerField(default=0)
    note = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=1000)


# ---- Responses ----

class QueueEntrySerializer(serializers.Serializer):
    unit_id = serializers.UUIDField()
    unit_type = serializers.CharField()
    item_id = serializers.UUIDField(allow_null=True)
    kanji_id = serializers.UUIDField(allow_null=True)
    display_text = serializers.CharField()
    meaning = serializers.CharField()
    additional_info = serializers.CharField(allow_null=True)
    skill = serializers.CharField()
    stage = serializers.IntegerField()
    next_review_at = AwareDateTimeField(allow_null=True)


class StudyProgressSerializer(serializers.ModelSerializer):
    unit_id = serializers.SerializerMethodField()
    unit_type = serializers.SerializerMethodField()
    item_id = serializers.UUIDField(read_only=True)
    kanji_id = serializers.UUIDField(read_only=True)
    last_reviewed_at = AwareDateTimeField(read_only=True)
    next_review_at = AwareDateTimeField(read_only=True)

    class Meta:
        model = StudyProgress
        fields = (
            "id",
            "unit_id",
            "unit_type",
            "item_id",
            "kanji_id",
            "skill",
            "stage",
            "last_reviewed_at",
            "next_review_at",
            "correct_streak",
            "wrong_count",
        )
        read_only_fields = fields

    def get_unit_id(self, obj) -> str:
        return str(obj.unit.id)

    def get_unit_type(self, obj) -> str:
        return obj.unit.kind.value


class ReviewSessionSerializer(serializers.ModelSerializer):
    started_at = AwareDateTimeField(read_only=True)
    ended_at = AwareDateTimeField(read_only=True)

    class Meta:
        model = ReviewSession
        fields = ("id", "started_at", "ended_at", "correct_count", "total_answered")
        read_only_fields = fields


class DifficultItemEntrySerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    japanese = serializers.CharField()
    meaning = serializers.CharField()
    note = serializers.CharField(allow_null=True)
    priority = serializers.IntegerField()
    skill = serializers.CharField()
    stage = serializers.IntegerField()
    next_review_at = AwareDateTimeField(allow_null=True)


class DashboardOverviewSerializer(serializers.Serializer):
    accuracy = serializers.FloatField()
    reviews_today = serializers.IntegerField()
    reviews_due = serializers.IntegerField()
    streak_days = serializers.IntegerField()
    srs_today = QueueEntrySerializer(many=True)
    difficult_items = DifficultItemEntrySerializer(many=True)


class DifficultItemMarkerSerializer(serializers.ModelSerializer):
    item_id = serializers.UUIDField(read_only=True)
    created_at = AwareDateTimeField(read_only=True)
    updated_at = AwareDateTimeField(read_only=True)

    class Meta:
        model = DifficultItemMarker
        fields = ("item_id", "note", "priority", "created_at", "updated_at")
        read_only_fields = fields
