"""
Notification Scheduler

Recurring reminders for weekly planning, today's recipe and the shopping
list. Each kind owns at most one pending timer; a reschedule pass cancels
every pending timer before arming the enabled kinds again, and a timer that
fires after it was superseded is discarded.

Days of the week use 0 = Sunday ... 6 = Saturday, as stored in settings.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError

from .errors import StoreFailure

logger = logging.getLogger(__name__)


class NotificationKind(Enum):
    WEEKLY_PLANNING = 'weekly_planning'
    DAILY_RECIPE = 'daily_recipe'
    SHOPPING_LIST = 'shopping_list'


class NotificationState(Enum):
    DISABLED = 'disabled'
    SCHEDULED = 'scheduled'


MESSAGES = {
    NotificationKind.WEEKLY_PLANNING: ('Wochenplanung', 'Zeit für deine Wochenplanung!'),
    NotificationKind.SHOPPING_LIST: ('Einkaufsliste', 'Vergiss nicht deine Einkäufe für die Woche!'),
}
DAILY_RECIPE_TITLE = 'Heutiges Gericht'


def parse_time(value):
    """'18:30' -> (18, 30)"""
    hours, minutes = value.split(':')
    return int(hours), int(minutes)


def sunday_based_weekday(moment):
    """Weekday with Sunday = 0."""
    return moment.isoweekday() % 7


def next_occurrence(day_index, time_of_day, now):
    """
    Next moment on weekday `day_index` at `time_of_day` strictly after `now`.

    Today's time is tried first; if it is not in the future the search
    starts from tomorrow and moves forward to the target weekday.
    """
    hours, minutes = parse_time(time_of_day)
    upcoming = now.replace(hour=hours, minute=minutes, second=0, microsecond=0)
    if upcoming <= now:
        upcoming += timedelta(days=1)
    upcoming += timedelta(days=(day_index - sunday_based_weekday(upcoming) + 7) % 7)
    return upcoming


def next_daily(time_of_day, now):
    """Tomorrow at `time_of_day`."""
    hours, minutes = parse_time(time_of_day)
    return (now + timedelta(days=1)).replace(hour=hours, minute=minutes, second=0, microsecond=0)


def is_enabled(settings, kind):
    return bool(getattr(settings, f'{kind.value}_notification'))


def next_fire_time(settings, kind, now):
    if kind is NotificationKind.DAILY_RECIPE:
        return next_daily(settings.daily_recipe_time, now)
    if kind is NotificationKind.WEEKLY_PLANNING:
        return next_occurrence(settings.weekly_planning_day, settings.weekly_planning_time, now)
    return next_occurrence(settings.shopping_list_day, settings.shopping_list_time, now)


class LogNotifier:
    """Notifier that writes notifications to the application log."""

    def request_permission(self):
        return True

    def show(self, title, body):
        logger.info("Notification: %s - %s", title, body)


@dataclass
class PendingNotification:
    kind: NotificationKind
    fire_at: datetime
    timer: object = None

    def cancel(self):
        if self.timer is not None:
            self.timer.cancel()


class NotificationScheduler:
    """
    Arms one timer per enabled notification kind.

    Args:
        notifier: Object with request_permission() -> bool and show(title, body)
        meal_lookup: Callable(date) -> recipe name or None, used by the
            daily recipe reminder
        clock: Callable returning the current datetime
        timer_factory: threading.Timer-compatible constructor
    """

    def __init__(self, notifier=None, meal_lookup=None, clock=None, timer_factory=threading.Timer):
        self.notifier = notifier or LogNotifier()
        self.meal_lookup = meal_lookup or (lambda day: None)
        self.clock = clock or datetime.now
        self.timer_factory = timer_factory
        self._lock = threading.Lock()
        self._pending = {}
        self._settings = None
        self._permission = None

    def state(self, kind):
        with self._lock:
            return NotificationState.SCHEDULED if kind in self._pending else NotificationState.DISABLED

    def pending(self, kind):
        """PendingNotification for a kind, or None."""
        with self._lock:
            return self._pending.get(kind)

    def reschedule(self, settings):
        """Cancel every pending reminder and arm the kinds enabled in `settings`."""
        with self._lock:
            self._settings = settings
            self._cancel_all()
            enabled = [kind for kind in NotificationKind if is_enabled(settings, kind)]
            if enabled and self._has_permission():
                for kind in enabled:
                    self._arm(kind)

    def cancel_all(self):
        with self._lock:
            self._cancel_all()

    def _cancel_all(self):
        for pending in self._pending.values():
            pending.cancel()
        self._pending.clear()

    def _has_permission(self):
        # Asked once, the first time any reminder is enabled
        if self._permission is None:
            self._permission = bool(self.notifier.request_permission())
            if not self._permission:
                logger.warning("Notification permission denied; reminders stay disabled")
        return self._permission

    def _arm(self, kind):
        now = self.clock()
        fire_at = next_fire_time(self._settings, kind, now)
        pending = PendingNotification(kind=kind, fire_at=fire_at)
        delay = max(0.0, (fire_at - now).total_seconds())
        timer = self.timer_factory(delay, self._fire, args=(kind, pending))
        timer.daemon = True
        pending.timer = timer
        self._pending[kind] = pending
        timer.start()
        logger.info("Scheduled %s reminder for %s", kind.value, fire_at.isoformat(timespec='minutes'))

    def _fire(self, kind, pending):
        with self._lock:
            if self._pending.get(kind) is not pending:
                logger.debug("Discarding superseded %s reminder", kind.value)
                return
            del self._pending[kind]

        try:
            self._deliver(kind)
        except Exception:
            logger.exception("Failed to deliver %s reminder", kind.value)
        finally:
            with self._lock:
                if kind not in self._pending and self._settings is not None and is_enabled(self._settings, kind):
                    self._arm(kind)

    def _deliver(self, kind):
        if kind is NotificationKind.DAILY_RECIPE:
            recipe_name = self.meal_lookup(self.clock().date())
            if recipe_name:
                self.notifier.show(DAILY_RECIPE_TITLE, f'Heute kochst du: {recipe_name}')
            return
        title, body = MESSAGES[kind]
        self.notifier.show(title, body)


def watch_settings(fetch_settings, scheduler, poll_seconds, stop_event):
    """
    Keep the scheduler in line with the stored settings until stop_event is set.

    Settings are polled every `poll_seconds`; a change triggers a full
    reschedule. A failed poll keeps the current schedule.
    """
    current = None
    try:
        while not stop_event.is_set():
            try:
                settings = fetch_settings()
            except (StoreFailure, SQLAlchemyError):
                logger.exception("Could not load settings; keeping current schedule")
            else:
                if settings != current:
                    scheduler.reschedule(settings)
                    current = settings
            stop_event.wait(poll_seconds)
    finally:
        scheduler.cancel_all()
