"""Django app configuration for the talkboard app."""

from django.apps import AppConfig


class DjangoTalkboardConfig(AppConfig):
    """Configuration for the talkboard app."""

    name = "django_talkboard"
    label = "talkboard"
    verbose_name = "Talkboard"
