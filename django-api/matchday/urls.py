from django.urls import path

from matchday.handlers import (
    AbsenceListView,
    AttendeeListView,
    AvailabilityView,
    ClockView,
    EventCancelView,
    EventDetailView,
    EventFinishView,
    EventListView,
    EventStartView,
    FinanceSummaryView,
    LiveStatView,
    ProgressionView,
    SignupDetailView,
    SignupListView,
    XpAdjustmentView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/signups", SignupListView.as_view(), name="signup-list"),
    path(
        "events/<str:event_id>/signups/<uuid:player_id>",
        SignupDetailView.as_view(),
        name="signup-detail",
    ),
    path("events/<str:event_id>/attendees", AttendeeListView.as_view(), name="attendee-list"),
    path("events/<str:event_id>/absences", AbsenceListView.as_view(), name="absence-list"),
    path("events/<str:event_id>/start", EventStartView.as_view(), name="event-start"),
    path("events/<str:event_id>/stats", LiveStatView.as_view(), name="event-stats"),
    path("events/<str:event_id>/clock", ClockView.as_view(), name="event-clock"),
    path("events/<str:event_id>/finish", EventFinishView.as_view(), name="event-finish"),
    path("events/<str:event_id>/cancel", EventCancelView.as_view(), name="event-cancel"),
    path(
        "events/<str:event_id>/availability",
        AvailabilityView.as_view(),
        name="event-availability",
    ),
    path(
        "players/<uuid:player_id>/xp-adjustments",
        XpAdjustmentView.as_view(),
        name="player-xp-adjustments",
    ),
    path(
        "players/<uuid:player_id>/progression",
        ProgressionView.as_view(),
        name="player-progression",
    ),
    path("finance/summary", FinanceSummaryView.as_view(), name="finance-summary"),
]
