"""Session state machine: phases, countdown, auto-start and auto-stop.

States are ``{FOCUS, SHORT_BREAK, LONG_BREAK} x {running, paused}``, starting
at ``(FOCUS, paused)`` and cycling forever::

    FOCUS --complete--> SHORT_BREAK   (session_number % interval != 0)
    FOCUS --complete--> LONG_BREAK    (session_number % interval == 0)
    *_BREAK --complete--> FOCUS       (session_number += 1)

start/pause toggle running within a phase; reset returns to
``(FOCUS, paused, session 1)``.

All methods are expected to run on one thread (the terminal loop that pumps
the clock and scheduler), so no locking is done here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from pomodoro_cli.models.settings import Settings

from .formatting import elapsed_focus_minutes
from .ledger import StatisticsLedger
from .ports import ClockDriver, NotificationSink, ScheduledTask, Scheduler
from .state import Command, Phase, TimerSnapshot, TimerState

logger = logging.getLogger(__name__)

AUTO_START_DELAY_SECONDS = 3.0


class SessionStateMachine:
    """Drives one user's focus/break cycle.

    Args:
        settings: Validated user settings.
        ledger: Receives finished focus blocks.
        clock: Tick source, started while the timer runs.
        scheduler: Runs the delayed auto-start.
        notifier: Receives messages and alert cues.
        now: Wall-clock source for history timestamps.
        cancel_auto_start_on_action: When True, a manual start, pause, reset
            or forced advance cancels a pending auto-start. When False the
            auto-start fires regardless of what happened in between.
    """

    def __init__(
        self,
        settings: Settings,
        ledger: StatisticsLedger,
        clock: ClockDriver,
        scheduler: Scheduler,
        notifier: NotificationSink,
        now: Callable[[], datetime] = datetime.now,
        cancel_auto_start_on_action: bool = True,
    ):
        self.settings = settings
        self.ledger = ledger
        self.clock = clock
        self.scheduler = scheduler
        self.notifier = notifier
        self._now = now
        self.cancel_auto_start_on_action = cancel_auto_start_on_action

        self.state = TimerState(
            remaining_seconds=settings.focus_seconds,
            phase_seconds=settings.focus_seconds,
        )
        self._auto_start: ScheduledTask | None = None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def dispatch(self, command: Command) -> None:
        """Apply a single command."""
        handlers = {
            Command.START: self.start,
            Command.PAUSE: self.pause,
            Command.RESET: self.reset,
            Command.FORCE_ADVANCE: self.complete_session,
            Command.TICK: self.on_tick,
        }
        handlers[Command(command)]()

    def start(self) -> None:
        """Start or resume the current phase. No-op while running."""
        self._cancel_pending_auto_start()
        self._start()

    def _start(self) -> None:
        if self.state.running:
            logger.debug("start ignored: already running")
            return

        self.state.running = True
        if self.state.phase is Phase.FOCUS and self.state.focus_started_at is None:
            self.state.focus_started_at = self._now()

        logger.info(
            "Started %s (session %d, %ss left)",
            self.state.phase.value,
            self.state.session_number,
            self.state.remaining_seconds,
        )
        self._alert()
        self.clock.start(self.on_tick)

    def pause(self) -> None:
        """Pause the countdown. Idempotent."""
        self._cancel_pending_auto_start()
        self._pause()

    def _pause(self) -> None:
        if self.state.running:
            logger.info("Paused %s", self.state.phase.value)
        self.state.running = False
        self.clock.stop()

    def reset(self) -> None:
        """Back to session 1 focus, paused. Statistics are left alone."""
        self.pause()
        self.state.session_number = 1
        self._begin_phase(Phase.FOCUS, self.settings.focus_minutes)
        self.state.focus_started_at = None
        logger.info("Timer reset")

    def on_tick(self) -> None:
        """Advance the countdown by one second."""
        if not self.state.running:
            return

        self.state.remaining_seconds -= 1
        if self.state.remaining_seconds != 0:
            return

        if self.settings.auto_stop_at_zero:
            self._complete(forced=False)
        else:
            # Keep counting into overtime; alert once at zero
            logger.info("%s reached zero; continuing in overtime", self.state.phase.value)
            self._alert()

    def complete_session(self) -> None:
        """Finish the current phase early (forced advance). Ignored while paused."""
        if not self.state.running:
            logger.debug("complete_session ignored: timer is paused")
            return
        self._cancel_pending_auto_start()
        self._complete(forced=True)

    def apply_settings(self, settings: Settings) -> None:
        """Use *settings* from now on; an idle timer is reset to match them."""
        self.settings = settings
        if not self.state.running:
            self.reset()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _complete(self, forced: bool) -> None:
        if not self.state.running:
            return

        if self.state.phase is Phase.FOCUS:
            self._flush_focus_block()

        self._pause()
        self._alert()

        if self.state.phase is Phase.FOCUS:
            self._enter_break(forced)
        else:
            self._enter_focus(forced)

    def _flush_focus_block(self) -> None:
        # Measured against the length the phase was entered with
        focus_minutes = self.state.phase_seconds // 60
        elapsed = elapsed_focus_minutes(focus_minutes, self.state.remaining_seconds)
        ended_at = self._now()
        started_at = self.state.focus_started_at or ended_at
        self.state.focus_started_at = None

        if elapsed < 1:
            return
        self.ledger.record_focus_completion(
            elapsed, started_at, ended_at, focus_minutes
        )
        self._notify(f"Recorded {elapsed} minutes of focus.")

    def _begin_phase(self, phase: Phase, minutes: int) -> None:
        self.state.phase = phase
        self.state.phase_seconds = minutes * 60
        self.state.remaining_seconds = minutes * 60

    def _enter_break(self, forced: bool) -> None:
        settings = self.settings
        if self.state.session_number % settings.long_break_interval == 0:
            phase, minutes, kind = Phase.LONG_BREAK, settings.long_break_minutes, "long"
        else:
            phase, minutes, kind = Phase.SHORT_BREAK, settings.short_break_minutes, "short"
        self._begin_phase(phase, minutes)

        if forced:
            self._notify(f"Switching to {minutes}-minute {kind} break.")
        elif kind == "long":
            self._notify(f"Great job! Take a {minutes}-minute long break.")
        else:
            self._notify(f"Well done! Take a {minutes}-minute short break.")

        if settings.auto_start_breaks:
            self._schedule_auto_start("Break started automatically!")

    def _enter_focus(self, forced: bool) -> None:
        minutes = self.settings.focus_minutes
        self.state.session_number += 1
        self._begin_phase(Phase.FOCUS, minutes)

        if forced:
            self._notify(f"Switching to {minutes}-minute focus session.")
        else:
            self._notify(f"Break over! Time to focus for {minutes} minutes.")

        if self.settings.auto_start_focus:
            self._schedule_auto_start("Focus session started automatically!")

    # ------------------------------------------------------------------
    # Auto-start
    # ------------------------------------------------------------------

    def _schedule_auto_start(self, message: str) -> None:
        def fire() -> None:
            if self._auto_start is task:
                self._auto_start = None
            if self.state.running:
                return
            self._start()
            self._notify(message)

        task = self.scheduler.call_later(AUTO_START_DELAY_SECONDS, fire)
        self._auto_start = task

    def _cancel_pending_auto_start(self) -> None:
        task = self._auto_start
        if task is None or not self.cancel_auto_start_on_action:
            return
        if task.pending:
            logger.debug("Cancelling pending auto-start")
        task.cancel()
        self._auto_start = None

    @property
    def auto_start_pending(self) -> bool:
        return self._auto_start is not None and self._auto_start.pending

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _notify(self, message: str) -> None:
        try:
            self.notifier.notify(message)
        except Exception:
            logger.warning("Notification failed: %s", message, exc_info=True)

    def _alert(self) -> None:
        if not self.settings.alarm_enabled:
            return
        try:
            self.notifier.alert(self.settings.alarm_sound_id.value)
        except Exception:
            logger.warning("Alert failed", exc_info=True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            phase=self.state.phase,
            session_number=self.state.session_number,
            remaining_seconds=self.state.remaining_seconds,
            running=self.state.running,
            total_seconds=self.state.phase_seconds,
            auto_start_pending=self.auto_start_pending,
        )
