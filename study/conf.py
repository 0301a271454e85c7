from django.conf import settings

DEFAULTS = {
    "QUEUE_DEFAULT_LIMIT": 20,
    "QUEUE_MAX_LIMIT": 100,
    "DASHBOARD_DUE_SAMPLE": 50,
    "DASHBOARD_DIFFICULT_LIMIT": 20,
    "DEFAULT_SKILL": "read",
    "ANSWER_RETRIES": 3,
}


def study_setting(name: str):
    """Read one knob from settings.STUDY, falling back to DEFAULTS."""
    return getattr(settings, "STUDY", {}).get(name, DEFAULTS[name])
