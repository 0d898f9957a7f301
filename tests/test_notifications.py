"""
Reminder scheduling: next fire time calculation and the scheduler's
timer bookkeeping, driven by fake timers and a fixed clock.
"""

import threading
from datetime import date, datetime

from constants import DEFAULT_SETTINGS
from schemas import SettingsSchema
from services import (
    NotificationKind,
    NotificationScheduler,
    NotificationState,
    StoreFailure,
    next_daily,
    next_occurrence,
    watch_settings,
)


def settings_with(**changes):
    return SettingsSchema(**dict(DEFAULT_SETTINGS, **changes))


# Tuesday
NOW = datetime(2025, 1, 7, 12, 0)


class FakeTimer:
    created = []

    def __init__(self, interval, function, args=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args)


class RecordingNotifier:

    def __init__(self, allow=True):
        self.allow = allow
        self.permission_requests = 0
        self.shown = []

    def request_permission(self):
        self.permission_requests += 1
        return self.allow

    def show(self, title, body):
        self.shown.append((title, body))


def _scheduler(notifier=None, meal_lookup=None):
    FakeTimer.created = []
    return NotificationScheduler(
        notifier=notifier or RecordingNotifier(),
        meal_lookup=meal_lookup,
        clock=lambda: NOW,
        timer_factory=FakeTimer,
    )


# ----------------------------------------------------------------------
# Fire time calculation
# ----------------------------------------------------------------------

def test_next_occurrence_later_in_week():
    # Monday 09:00 seen from Tuesday noon is six days out
    assert next_occurrence(1, '09:00', NOW) == datetime(2025, 1, 13, 9, 0)


def test_next_occurrence_today_if_still_ahead():
    assert next_occurrence(2, '18:30', NOW) == datetime(2025, 1, 7, 18, 30)


def test_next_occurrence_today_if_passed_goes_to_next_week():
    assert next_occurrence(2, '08:00', NOW) == datetime(2025, 1, 14, 8, 0)


def test_next_occurrence_sunday_is_zero():
    assert next_occurrence(0, '18:00', NOW) == datetime(2025, 1, 12, 18, 0)


def test_next_occurrence_is_always_in_the_future():
    for day in range(7):
        fire_at = next_occurrence(day, '12:00', NOW)
        assert NOW < fire_at <= datetime(2025, 1, 14, 12, 0)
        assert fire_at.isoweekday() % 7 == day


def test_next_daily_is_tomorrow():
    assert next_daily('09:00', NOW) == datetime(2025, 1, 8, 9, 0)


# ----------------------------------------------------------------------
# Scheduler
# ----------------------------------------------------------------------

def test_disabled_settings_arm_nothing():
    notifier = RecordingNotifier()
    scheduler = _scheduler(notifier)

    scheduler.reschedule(settings_with())

    assert FakeTimer.created == []
    assert notifier.permission_requests == 0
    for kind in NotificationKind:
        assert scheduler.state(kind) is NotificationState.DISABLED


def test_enabled_kinds_are_armed_once():
    scheduler = _scheduler()

    scheduler.reschedule(settings_with(weekly_planning_notification=True, weekly_planning_day=1, weekly_planning_time='09:00'))

    assert len(FakeTimer.created) == 1
    timer = FakeTimer.created[0]
    assert timer.started and timer.daemon
    assert timer.interval == 6 * 24 * 3600 - 3 * 3600
    assert scheduler.state(NotificationKind.WEEKLY_PLANNING) is NotificationState.SCHEDULED
    assert scheduler.pending(NotificationKind.WEEKLY_PLANNING).fire_at == datetime(2025, 1, 13, 9, 0)


def test_reschedule_cancels_previous_timers():
    scheduler = _scheduler()
    settings = settings_with(shopping_list_notification=True)

    scheduler.reschedule(settings)
    first = FakeTimer.created[0]
    scheduler.reschedule(settings)

    assert first.cancelled
    assert len(FakeTimer.created) == 2
    assert not FakeTimer.created[1].cancelled


def test_disabling_a_kind_cancels_its_timer():
    scheduler = _scheduler()

    scheduler.reschedule(settings_with(shopping_list_notification=True))
    scheduler.reschedule(settings_with())

    assert FakeTimer.created[0].cancelled
    assert scheduler.state(NotificationKind.SHOPPING_LIST) is NotificationState.DISABLED


def test_superseded_timer_is_discarded():
    notifier = RecordingNotifier()
    scheduler = _scheduler(notifier)
    settings = settings_with(shopping_list_notification=True)

    scheduler.reschedule(settings)
    stale = FakeTimer.created[0]
    scheduler.reschedule(settings)
    stale.fire()

    assert notifier.shown == []
    assert len(FakeTimer.created) == 2


def test_fire_delivers_and_rearms():
    notifier = RecordingNotifier()
    scheduler = _scheduler(notifier)

    scheduler.reschedule(settings_with(weekly_planning_notification=True))
    FakeTimer.created[0].fire()

    assert notifier.shown == [('Wochenplanung', 'Zeit für deine Wochenplanung!')]
    assert len(FakeTimer.created) == 2
    assert scheduler.state(NotificationKind.WEEKLY_PLANNING) is NotificationState.SCHEDULED


def test_daily_reminder_names_todays_recipe():
    notifier = RecordingNotifier()
    looked_up = []

    def lookup(day):
        looked_up.append(day)
        return 'Lasagne'

    scheduler = _scheduler(notifier, meal_lookup=lookup)
    scheduler.reschedule(settings_with(daily_recipe_notification=True))
    FakeTimer.created[0].fire()

    assert looked_up == [date(2025, 1, 7)]
    assert notifier.shown == [('Heutiges Gericht', 'Heute kochst du: Lasagne')]


def test_daily_reminder_is_silent_without_meal():
    notifier = RecordingNotifier()
    scheduler = _scheduler(notifier, meal_lookup=lambda day: None)

    scheduler.reschedule(settings_with(daily_recipe_notification=True))
    FakeTimer.created[0].fire()

    assert notifier.shown == []
    assert scheduler.state(NotificationKind.DAILY_RECIPE) is NotificationState.SCHEDULED


def test_failed_delivery_still_rearms():
    def lookup(day):
        raise StoreFailure('backend down')

    scheduler = _scheduler(meal_lookup=lookup)
    scheduler.reschedule(settings_with(daily_recipe_notification=True))
    FakeTimer.created[0].fire()

    assert len(FakeTimer.created) == 2


def test_permission_denied_keeps_everything_disabled():
    notifier = RecordingNotifier(allow=False)
    scheduler = _scheduler(notifier)
    settings = settings_with(weekly_planning_notification=True, shopping_list_notification=True)

    scheduler.reschedule(settings)
    scheduler.reschedule(settings)

    assert FakeTimer.created == []
    assert notifier.permission_requests == 1
    assert scheduler.state(NotificationKind.WEEKLY_PLANNING) is NotificationState.DISABLED


def test_cancel_all():
    scheduler = _scheduler()
    scheduler.reschedule(settings_with(weekly_planning_notification=True, shopping_list_notification=True))

    scheduler.cancel_all()

    assert all(timer.cancelled for timer in FakeTimer.created)
    assert scheduler.pending(NotificationKind.SHOPPING_LIST) is None


# ----------------------------------------------------------------------
# Settings watcher
# ----------------------------------------------------------------------

class RecordingScheduler:

    def __init__(self):
        self.rescheduled = []
        self.cancelled = 0

    def reschedule(self, settings):
        self.rescheduled.append(settings)

    def cancel_all(self):
        self.cancelled += 1


def test_watch_settings_reschedules_only_on_change():
    stop = threading.Event()
    responses = [
        settings_with(),
        settings_with(),
        StoreFailure('offline'),
        settings_with(dark_mode=True),
    ]

    def fetch():
        response = responses.pop(0)
        if not responses:
            stop.set()
        if isinstance(response, Exception):
            raise response
        return response

    scheduler = RecordingScheduler()
    watch_settings(fetch, scheduler, 0, stop)

    assert scheduler.rescheduled == [settings_with(), settings_with(dark_mode=True)]
    assert scheduler.cancelled == 1
