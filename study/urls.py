from django.urls import path
from .views import (
    AnswerView,
    DashboardOverviewView,
    DifficultItemView,
    QueueByLessonsView,
    QueueByPackageView,
    QueueView,
    SessionEndView,
    SessionStartView,
)

urlpatterns = [
    path("study/queue", QueueView.as_view(), name="study-queue"),
    path("study/queue/lessons", QueueByLessonsView.as_view(), name="study-queue-lessons"),
    path("study/queue/package", QueueByPackageView.as_view(), name="study-queue-package"),
    path("study/answer", AnswerView.as_view(), name="study-answer"),
    path("study/sessions", SessionStartView.as_view(), name="study-session-start"),
    path("study/sessions/<uuid:session_id>/end", SessionEndView.as_view(), name="study-session-end"),
    path("dashboard/overview", DashboardOverviewView.as_view(), name="dashboard-overview"),
    path("dashboard/difficult-items/<uuid:item_id>", DifficultItemView.as_view(), name="dashboard-difficult-item"),
]
