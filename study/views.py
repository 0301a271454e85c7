# study/views.py
from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from . import dashboard, due_queue, markers, services, sessions
from .serializers import (
    AnswerSerializer,
    DashboardOverviewSerializer,
    DashboardQuerySerializer,
    DifficultItemMarkerSerializer,
    EndSessionSerializer,
    MarkDifficultSerializer,
    QueueByLessonsSerializer,
    QueueByPackageSerializer,
    QueueEntrySerializer,
    QueueQuerySerializer,
    ReviewSessionSerializer,
    StudyProgressSerializer,
)


def _user_id(request) -> str:
    """The authenticated user id, set upstream in the X-User-Id header."""
    return services.require_user(request.headers.get("X-User-Id"))


def _validated(serializer_class, data) -> dict:
    s = serializer_class(data=data)
    s.is_valid(raise_exception=True)
    return s.validated_data


class QueueView(APIView):
    """GET /api/study/queue?skill=read&limit=20"""
    def get(self, request):
        user_id = _user_id(request)
        q = _validated(QueueQuerySerializer, request.query_params)
        entries = due_queue.get_queue(user_id, skill=q.get("skill"), limit=q.get("limit"))
        return Response(QueueEntrySerializer(entries, many=True).data)


class QueueByLessonsView(APIView):
    """POST /api/study/queue/lessons {lesson_ids, skill?, limit?, include_items?, include_kanjis?}"""
    def post(self, request):
        user_id = _user_id(request)
        body = _validated(QueueByLessonsSerializer, request.data)
        entries = due_queue.get_queue_by_lessons(
            user_id,
            body["lesson_ids"],
            skill=body.get("skill"),
            limit=body.get("limit"),
            include_items=body["include_items"],
            include_kanjis=body["include_kanjis"],
        )
        return Response(QueueEntrySerializer(entries, many=True).data)


class QueueByPackageView(APIView):
    """POST /api/study/queue/package {package_id, lesson_ids?, skill?, limit?, include_items?, include_kanjis?}"""
    def post(self, request):
        user_id = _user_id(request)
        body = _validated(QueueByPackageSerializer, request.data)
        entries = due_queue.get_queue_by_package(
            user_id,
            body["package_id"],
            lesson_ids=body.get("lesson_ids"),
            skill=body.get("skill"),
            limit=body.get("limit"),
            include_items=body["include_items"],
            include_kanjis=body["include_kanjis"],
        )
        return Response(QueueEntrySerializer(entries, many=True).data)


class AnswerView(APIView):
    """POST /api/study/answer {item_id | kanji_id, skill, is_correct, session_id?}"""
    def post(self, request):
        user_id = _user_id(request)
        body = _validated(AnswerSerializer, request.data)
        progress = services.submit_answer(
            user_id,
            body["unit"],
            body["skill"],
            body["is_correct"],
            session_id=body.get("session_id"),
        )
        return Response(StudyProgressSerializer(progress).data)


class SessionStartView(APIView):
    """POST /api/study/sessions"""
    def post(self, request):
        session = sessions.start_session(_user_id(request))
        return Response(ReviewSessionSerializer(session).data, status=status.HTTP_201_CREATED)


class SessionEndView(APIView):
    """POST /api/study/sessions/{id}/end {correct_count?, total_answered?}"""
    def post(self, request, session_id):
        user_id = _user_id(request)
        body = _validated(EndSessionSerializer, request.data)
        session = sessions.end_session(
            session_id,
            body.get("correct_count"),
            body.get("total_answered"),
            user_id=user_id,
        )
        return Response(ReviewSessionSerializer(session).data)


class DashboardOverviewView(APIView):
    """GET /api/dashboard/overview?skill=read&tz=Asia/Tokyo"""
    def get(self, request):
        user_id = _user_id(request)
        q = _validated(DashboardQuerySerializer, request.query_params)
        data = dashboard.overview(user_id, skill=q.get("skill"), tz=q["tz"])
        return Response(DashboardOverviewSerializer(data).data)


class DifficultItemView(APIView):
    """
    PUT    /api/dashboard/difficult-items/{item_id} {priority?, note?}
    DELETE /api/dashboard/difficult-items/{item_id}
    """
    def put(self, request, item_id):
        user_id = _user_id(request)
        body = _validated(MarkDifficultSerializer, request.data)
        marker = markers.mark_difficult(
            user_id, item_id, priority=body["priority"], note=body.get("note")
        )
        return Response(DifficultItemMarkerSerializer(marker).data)

    def delete(self, request, item_id):
        markers.unmark_difficult(_user_id(request), item_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
