"""URL configuration for the example kiosk."""

from django.urls import include, path
from django.views.generic import RedirectView

urlpatterns = [
    path("", RedirectView.as_view(pattern_name="talkboard:room-list"), name="root"),
    path("talkboard/", include("django_talkboard.urls")),
]
