import uuid

from django.db import models
from django.utils import timezone


class Item(models.Model):
    """Vocabulary unit: a word, phrase or sentence."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    japanese = models.CharField(max_length=200)
    reading = models.CharField(max_length=200, null=True, blank=True)
    meaning = models.CharField(max_length=500)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    def __str__(self):
        return self.japanese


class Kanji(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    character = models.CharField(max_length=10, unique=True)
    meaning = models.CharField(max_length=200)
    meaning_vietnamese = models.CharField(max_length=200, null=True, blank=True)
    onyomi = models.CharField(max_length=200, null=True, blank=True)   # Chinese reading
    kunyomi = models.CharField(max_length=200, null=True, blank=True)  # Native reading
    created_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return self.character


class Package(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)

    def __str__(self):
        return self.title


class Lesson(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    package = models.ForeignKey(Package, on_delete=models.CASCADE, related_name="lessons")
    title = models.CharField(max_length=200)
    order = models.IntegerField(default=0)
    items = models.ManyToManyField(Item, related_name="lessons", blank=True)
    kanjis = models.ManyToManyField(Kanji, related_name="lessons", blank=True)

    class Meta:
        ordering = ("package", "order")

    def __str__(self):
        return self.title
