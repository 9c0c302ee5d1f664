"""Notification scheduler - turns alert, tip, and bill intents into timed local notifications"""

import asyncio
import logging
import random
from datetime import datetime
from typing import Callable, List, Optional

from budget_notifier.domain.models import (
    BillReminder,
    Budget,
    NotificationIntent,
    NotificationKind,
    NotificationPriority,
    SpendingPattern,
    Transaction,
)
from budget_notifier.domain.patterns import needs_budget_alert
from budget_notifier.domain.scheduling import (
    AbsoluteSchedule,
    ScheduleSpec,
    WeeklySchedule,
    delay_seconds,
    random_daily_slot,
    random_weekly_slot,
    resolve_trigger,
    validate_hour,
)
from budget_notifier.infrastructure.observability.logging import log_notification_scheduled
from budget_notifier.infrastructure.observability.metrics import (
    bill_reminders_cancelled_counter,
    notification_failures_counter,
    record_scheduled,
)
from budget_notifier.infrastructure.substrate.base import (
    DEFAULT_CHANNEL,
    DisplayPolicy,
    NotificationContent,
    NotificationSubstrate,
    to_substrate_priority,
)
from budget_notifier.services.insights import InsightService
from budget_notifier.utils.date_utils import at_local_time

logger = logging.getLogger(__name__)

BILL_REMINDER_HOUR = 9

Clock = Callable[[], datetime]


class NotificationScheduler:
    """
    Schedules AI-assisted budget notifications and bill reminders.

    One instance per running application. The instance owns the
    initialization state; clock and random source are injectable so
    scheduling is reproducible in tests.
    """

    def __init__(
        self,
        substrate: NotificationSubstrate,
        insights: InsightService | None = None,
        clock: Clock = datetime.now,
        rng: random.Random | None = None,
    ):
        self.substrate = substrate
        self.insights = insights or InsightService()
        self.clock = clock
        self.rng = rng or random.Random()
        self._ready = False
        self._pending: Optional[asyncio.Task] = None

    def is_ready(self) -> bool:
        return self._ready

    async def initialize(self) -> bool:
        """
        Register display policy and channel, then request permission.

        Concurrent callers share a single in-flight attempt. Never raises:
        failures are logged and reported as False.
        """
        if self._ready:
            return True
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._initialize())
        pending = self._pending
        try:
            return await asyncio.shield(pending)
        finally:
            if pending.done() and self._pending is pending:
                self._pending = None

    async def ensure_ready(self) -> bool:
        return await self.initialize()

    async def _initialize(self) -> bool:
        try:
            await self.substrate.set_display_policy(DisplayPolicy(show_alert=True, play_sound=True, set_badge=False))
            await self.substrate.ensure_channel(DEFAULT_CHANNEL)
            granted = await self.substrate.request_permission()
            self._ready = bool(granted)
            if not self._ready:
                logger.warning("Notification permission not granted", extra={"step": "initialize"})
            return self._ready
        except Exception as e:
            logger.error(f"Failed to initialize notifications: {e}", extra={"step": "initialize"})
            return False

    async def schedule_notification(
        self,
        intent: NotificationIntent,
        schedule: ScheduleSpec,
        kind: NotificationKind | None = None,
    ) -> Optional[str]:
        """
        Resolve schedule and submit a one-shot notification to the substrate.

        Raises:
            ScheduleWindowError: Explicit hour outside the permitted window

        Returns None when the substrate fails or the trigger cannot be
        placed in the future.
        """
        validate_hour(schedule)

        now = self.clock()
        trigger = resolve_trigger(schedule, now)
        if trigger <= now:
            notification_failures_counter.inc()
            logger.warning(
                f"Trigger time {trigger.isoformat()} is not in the future",
                extra={"step": "schedule_notification", "kind": kind.value if kind else None},
            )
            return None

        delay = delay_seconds(trigger, now)
        content = NotificationContent(
            title=intent.title,
            body=intent.body,
            data=dict(intent.data),
            sound=intent.play_sound,
            priority=to_substrate_priority(intent.priority),
        )
        try:
            identifier = await self.substrate.schedule_at(content, delay, repeats=False)
        except Exception as e:
            notification_failures_counter.inc()
            logger.error(f"Failed to schedule notification: {e}", extra={"step": "schedule_notification"})
            return None

        record_scheduled(kind.value if kind else None)
        log_notification_scheduled(identifier, kind.value if kind else None, delay)
        return identifier

    async def schedule_random_notifications(self, transactions: List[Transaction], budgets: List[Budget]) -> None:
        """
        Schedule budget alerts, spending tips, and saving opportunities.

        The three batches run concurrently; a failing batch is logged and
        does not stop the others.
        """
        if not self._ready and not await self.initialize():
            return

        pattern = await self.insights.analyze_spending_patterns(transactions, budgets)

        batches = {
            "budget_alerts": self._schedule_budget_alerts(budgets, pattern),
            "spending_tips": self._schedule_spending_tips(pattern),
            "saving_opportunities": self._schedule_saving_opportunities(pattern),
        }
        results = await asyncio.gather(*batches.values(), return_exceptions=True)
        for name, result in zip(batches, results):
            if isinstance(result, BaseException):
                logger.error(f"Notification batch {name} failed: {result}", extra={"step": name})

    async def _schedule_budget_alerts(self, budgets: List[Budget], pattern: SpendingPattern) -> None:
        async def alert(budget: Budget) -> Optional[str]:
            message = await self.insights.generate_notification_content(pattern, budgets, NotificationKind.BUDGET_ALERT)
            return await self.schedule_notification(
                NotificationIntent(
                    title="Budget Alert",
                    body=message,
                    data={"category": budget.category.value},
                    priority=NotificationPriority.HIGH,
                ),
                random_daily_slot(self.rng),
                NotificationKind.BUDGET_ALERT,
            )

        await asyncio.gather(*(alert(budget) for budget in budgets if needs_budget_alert(budget)))

    async def _schedule_spending_tips(self, pattern: SpendingPattern) -> None:
        count = self.rng.randint(2, 3)
        await self._schedule_weekly_batch(pattern, count, "Spending Tip", NotificationKind.SPENDING_TIP)

    async def _schedule_saving_opportunities(self, pattern: SpendingPattern) -> None:
        count = self.rng.randint(1, 2)
        await self._schedule_weekly_batch(pattern, count, "Saving Opportunity", NotificationKind.SAVING_OPPORTUNITY)

    async def _schedule_weekly_batch(self, pattern: SpendingPattern, count: int, title: str, kind: NotificationKind) -> None:
        # Slots are drawn up front so the random sequence doesn't depend on task interleaving
        slots = [random_weekly_slot(self.rng) for _ in range(count)]

        async def one(slot: WeeklySchedule) -> Optional[str]:
            message = await self.insights.generate_notification_content(pattern, [], kind)
            return await self.schedule_notification(
                NotificationIntent(title=title, body=message, priority=NotificationPriority.DEFAULT),
                slot,
                kind,
            )

        await asyncio.gather(*(one(slot) for slot in slots))

    async def schedule_bill_reminder(self, reminder: BillReminder) -> Optional[str]:
        """
        Schedule a "Bill Due Today" notification at 09:00 local time on the due date.

        Returns None for paid reminders and for due times already past.
        """
        if not self._ready:
            # Proceeds regardless; without permission the notification simply won't alert
            await self.initialize()

        due_at = at_local_time(reminder.due_date, BILL_REMINDER_HOUR)
        if reminder.paid or due_at <= self.clock():
            return None

        return await self.schedule_notification(
            NotificationIntent(
                title="Bill Due Today",
                body=f"{reminder.title} - ${reminder.amount:.2f} is due today",
                data={"reminderId": reminder.id},
            ),
            AbsoluteSchedule(when=due_at),
            NotificationKind.BILL_REMINDER,
        )

    async def cancel_bill_reminder(self, reminder_id: str) -> None:
        """Cancel every pending notification that refers to reminder_id"""
        try:
            scheduled = await self.substrate.list_scheduled()
        except Exception as e:
            logger.error(
                f"Failed to cancel bill reminder {reminder_id}: {e}",
                extra={"step": "cancel_bill_reminder", "reminder_id": reminder_id},
            )
            return

        matches = [n for n in scheduled if (n.content.data or {}).get("reminderId") == reminder_id]
        results = await asyncio.gather(
            *(self.substrate.cancel(n.identifier) for n in matches),
            return_exceptions=True,
        )
        cancelled = 0
        for notification, result in zip(matches, results):
            if isinstance(result, BaseException):
                logger.error(
                    f"Failed to cancel notification {notification.identifier}: {result}",
                    extra={"step": "cancel_bill_reminder", "reminder_id": reminder_id},
                )
            else:
                cancelled += 1
        if cancelled:
            bill_reminders_cancelled_counter.inc(cancelled)

    async def sync_bill_reminder(self, reminder: BillReminder) -> Optional[str]:
        """Bring pending notifications in line with the reminder's paid flag"""
        await self.cancel_bill_reminder(reminder.id)
        if reminder.paid:
            return None
        return await self.schedule_bill_reminder(reminder)

    async def schedule_next_occurrence(self, reminder: BillReminder) -> Optional[str]:
        """Schedule the following period of a recurring bill"""
        upcoming = reminder.next_occurrence()
        if upcoming is None:
            return None
        return await self.schedule_bill_reminder(upcoming)

    async def schedule_bill_reminders(self, reminders: List[BillReminder]) -> List[Optional[str]]:
        """Schedule a list of reminders in order, as loaded from the store"""
        results = []
        for reminder in reminders:
            results.append(await self.schedule_bill_reminder(reminder))
        return results
