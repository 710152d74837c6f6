"""Full-screen timer UI and terminal notification sink."""

from __future__ import annotations

import time
from collections.abc import Callable

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from .formatting import format_duration
from .keyboard import QUIT_KEY, command_for_key, open_key_reader
from .ledger import Statistics
from .machine import SessionStateMachine
from .ports import NotificationSink
from .state import Phase, TimerSnapshot

TOAST_SECONDS = 3.0
REFRESH_SECONDS = 0.1

_PHASE_STYLES = {
    Phase.FOCUS: ("🍅", "cyan"),
    Phase.SHORT_BREAK: ("☕", "yellow"),
    Phase.LONG_BREAK: ("🌴", "magenta"),
}

# Terminal bells rung per alert sound
_BELLS = {"bell": 1, "chime": 2, "digital": 3}


class RichNotificationSink(NotificationSink):
    """Shows messages as a toast line and alerts with the terminal bell."""

    def __init__(
        self,
        console: Console | None = None,
        time_source: Callable[[], float] = time.monotonic,
    ):
        self.console = console or Console()
        self._time = time_source
        self._message: str | None = None
        self._expires_at = 0.0

    def notify(self, message: str) -> None:
        self._message = message
        self._expires_at = self._time() + TOAST_SECONDS

    def alert(self, sound_id: str) -> None:
        for _ in range(_BELLS.get(sound_id, 1)):
            self.console.bell()

    @property
    def current_message(self) -> str | None:
        """The toast to show, or None once it has expired."""
        if self._message is not None and self._time() >= self._expires_at:
            self._message = None
        return self._message


class TimerDisplay:
    """Manages the fullscreen timer display."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def create_layout(
        self,
        snapshot: TimerSnapshot,
        statistics: Statistics | None = None,
        toast: str | None = None,
    ) -> Layout:
        """Create the timer layout with all components."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        emoji, color = _PHASE_STYLES[snapshot.phase]
        if not snapshot.running:
            color = "dim"
        header_text = Text(
            f"{emoji}  {snapshot.title}", style=f"bold {color}", justify="center"
        )
        layout["header"].update(Align.center(header_text, vertical="middle"))

        body = self._create_body_content(snapshot, statistics, toast)
        layout["body"].update(Align.center(body, vertical="middle"))

        layout["footer"].update(
            Align.center(self._create_footer_text(snapshot), vertical="middle")
        )
        return layout

    def _create_body_content(
        self,
        snapshot: TimerSnapshot,
        statistics: Statistics | None,
        toast: str | None,
    ) -> Group:
        components = []

        if snapshot.in_overtime:
            timer_color = "red"
        elif not snapshot.running:
            timer_color = "yellow"
        elif snapshot.remaining_seconds < 60:
            timer_color = "red"
        else:
            timer_color = _PHASE_STYLES[snapshot.phase][1]

        components.append(
            Text(snapshot.countdown, style=f"bold {timer_color}", justify="center")
        )
        components.append(Text(""))

        bar_width = 40
        filled = int(bar_width * snapshot.progress_pct / 100)
        progress_bar = "▓" * filled + "░" * (bar_width - filled)
        components.append(
            Text(f"{progress_bar}  {snapshot.progress_pct}%", style="dim", justify="center")
        )

        if statistics is not None:
            components.append(Text(""))
            components.append(
                Text(
                    f"Today: {statistics.today_pomodoros}  •  "
                    f"Total: {statistics.total_pomodoros}  •  "
                    f"Focus time: {format_duration(statistics.total_focus_minutes)}",
                    style="dim",
                    justify="center",
                )
            )

        if snapshot.auto_start_pending:
            components.append(Text(""))
            components.append(
                Text("Starting automatically…", style="italic", justify="center")
            )

        if toast:
            components.append(Text(""))
            components.append(Panel(Text(toast, justify="center"), border_style="blue"))

        return Group(*components)

    def _create_footer_text(self, snapshot: TimerSnapshot) -> Text:
        """Create footer with keyboard hints."""
        if snapshot.running:
            hints = "'p' pause  •  'n' next  •  'r' reset  •  'q' quit"
        else:
            hints = "'s' start  •  'r' reset  •  'q' quit"
        return Text(hints, style="dim", justify="center")

    def run(
        self,
        machine: SessionStateMachine,
        pump: Callable[[], None],
        sink: RichNotificationSink | None = None,
    ) -> str:
        """
        Run the fullscreen timer until the user quits.

        *pump* delivers due clock ticks and scheduled callbacks; it is called
        on this thread between key presses. Returns 'quit' or 'interrupted'.
        """
        keyboard = open_key_reader()

        def render() -> Layout:
            toast = sink.current_message if sink else None
            return self.create_layout(
                machine.snapshot(), machine.ledger.statistics, toast
            )

        try:
            with Live(
                render(),
                console=self.console,
                refresh_per_second=10,
                screen=True,
            ) as live:
                while True:
                    key = keyboard.read_key()
                    if key == QUIT_KEY:
                        machine.pause()
                        return "quit"
                    command = command_for_key(key)
                    if command is not None:
                        machine.dispatch(command)

                    pump()
                    live.update(render())
                    time.sleep(REFRESH_SECONDS)

        except KeyboardInterrupt:
            machine.pause()
            return "interrupted"
        finally:
            keyboard.stop()


def show_session_summary(statistics: Statistics, console: Console | None = None):
    """Show totals after leaving the full-screen timer."""
    console = console or Console()

    panel = Panel(
        f"""[bold green]🍅 Session Summary[/bold green]

Pomodoros today: {statistics.today_pomodoros}
Pomodoros total: {statistics.total_pomodoros}
Total focus time: {format_duration(statistics.total_focus_minutes)}""",
        border_style="green",
        padding=(1, 2),
    )

    console.print(panel)
