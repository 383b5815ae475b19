from matchday.handlers.views import (
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

__all__ = [
    "AbsenceListView",
    "AttendeeListView",
    "AvailabilityView",
    "ClockView",
    "EventCancelView",
    "EventDetailView",
    "EventFinishView",
    "EventListView",
    "EventStartView",
    "FinanceSummaryView",
    "LiveStatView",
    "ProgressionView",
    "SignupDetailView",
    "SignupListView",
    "XpAdjustmentView",
]
