"""URL configuration for the talkboard app.

Mount these under any prefix in the host project::

    urlpatterns = [
        path("talkboard/", include("django_talkboard.urls")),
    ]
"""

from django.urls import path

from django_talkboard.views import RoomListJSONView, RoomNowJSONView

app_name = "talkboard"

urlpatterns = [
    path("rooms.json", RoomListJSONView.as_view(), name="room-list"),
    path("rooms/<str:room>/now.json", RoomNowJSONView.as_view(), name="room-now"),
]
