"""tasktop - Interactive Textual display."""

from queue import Empty, Queue

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.css.query import NoMatches
from textual.widgets import DataTable, Footer, Input, Static

from tasktop import query
from tasktop.config import MonitorConfig
from tasktop.control import ProcessControl
from tasktop.errors import KillError
from tasktop.formatting import format_bytes, render_sparkline
from tasktop.models import ProcessSample, SortField, SortOrder
from tasktop.monitor import SnapshotSource, SystemMonitor, SystemSnapshot
from tasktop.spikes import DEFAULT_SPIKE_THRESHOLD, spike_flags


class HistoryStats(Static):
    """Header widget with CPU and memory history sparklines."""

    DEFAULT_CSS = """
    HistoryStats {
        height: auto;
        min-height: 3;
        padding: 0 1;
        background: $surface;
    }
    """

    def __init__(self, *args, spike_threshold: float = DEFAULT_SPIKE_THRESHOLD, **kwargs) -> None:
        """Initialize HistoryStats."""
        super().__init__(*args, **kwargs)
        self._spike_threshold = spike_threshold
        self._cpu_history: tuple[float, ...] = ()
        self._memory_history: tuple[float, ...] = ()

    def compose(self) -> ComposeResult:
        """Compose the history layout."""
        yield Horizontal(
            Static(self._get_cpu_info(), id="cpu-info"),
            Static(self._get_mem_info(), id="mem-info"),
        )

    def update_histories(self, cpu_history: tuple[float, ...], memory_history: tuple[float, ...]) -> None:
        """Update the series from a system snapshot."""
        self._cpu_history = cpu_history
        self._memory_history = memory_history
        try:
            self.query_one("#cpu-info", Static).update(self._get_cpu_info())
            self.query_one("#mem-info", Static).update(self._get_mem_info())
        except NoMatches:
            pass  # Widget not mounted yet

    def _get_cpu_info(self) -> str:
        return self._describe("CPU Usage (%)", self._cpu_history)

    def _get_mem_info(self) -> str:
        return self._describe("Memory Usage (%)", self._memory_history)

    def _describe(self, label: str, series: tuple[float, ...]) -> str:
        flags = spike_flags(series, self._spike_threshold)
        current = f"{series[-1]:5.1f}%" if series else "  -  "
        alert = " [bold red]SPIKE[/bold red]" if flags and flags[-1] else ""
        return f"{label} {current}{alert}\n{render_sparkline(series, flags)}"


class ProcessTable(Container):
    """Filtered, sorted view of the latest process snapshot."""

    DEFAULT_CSS = """
    ProcessTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize ProcessTable."""
        super().__init__(*args, **kwargs)
        self._processes: list[ProcessSample] = []
        self._visible_pids: list[int] = []
        self._filter_text: str = ""
        self._sort_field: SortField = SortField.PID
        self._sort_direction: SortOrder = SortOrder.ASC

    @property
    def sort_field(self) -> SortField:
        """Get current sort field."""
        return self._sort_field

    @property
    def sort_direction(self) -> SortOrder:
        """Get current sort direction."""
        return self._sort_direction

    @property
    def visible_pids(self) -> list[int]:
        """PIDs currently shown, in display order."""
        return list(self._visible_pids)

    def sort_by(self, field: SortField) -> None:
        """Sort by a field; selecting the current field again flips the order."""
        if field is self._sort_field:
            self._sort_direction = self._sort_direction.flipped()
        else:
            self._sort_field = field
            self._sort_direction = SortOrder.ASC
        self._render_rows()

    def cycle_sort(self) -> SortField:
        """Cycle to the next sort field and return it."""
        fields = list(SortField)
        next_index = (fields.index(self._sort_field) + 1) % len(fields)
        self.sort_by(fields[next_index])
        return self._sort_field

    def set_filter(self, text: str) -> None:
        """Filter the view by PID or command substring."""
        self._filter_text = text
        self._render_rows()

    def selected_pid(self) -> int | None:
        """PID of the highlighted row, if any."""
        table = self.query_one("#process-table", DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return int(row_key.value) if row_key.value is not None else None

    def compose(self) -> ComposeResult:
        """Compose the process table."""
        yield DataTable(id="process-table")

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        table = self.query_one("#process-table", DataTable)
        table.cursor_type = "row"

        table.add_column("PID", key="pid", width=8)
        table.add_column("User", key="user", width=12)
        table.add_column("CPU%", key="cpu", width=8)
        table.add_column("Memory", key="memory", width=9)
        table.add_column("Command", key="command")

    def on_data_table_header_selected(self, event: DataTable.HeaderSelected) -> None:
        """Sort by the clicked column."""
        try:
            field = query.parse_sort_field(str(event.column_key.value))
        except ValueError:
            return  # Column is not sortable
        self.sort_by(field)

    def update_processes(self, processes: list[ProcessSample]) -> None:
        """Replace the snapshot and redraw."""
        self._processes = processes
        self._render_rows()

    def _render_rows(self) -> None:
        """Rebuild rows from the current snapshot, keeping the highlighted PID."""
        view = query.apply(self._processes, self._filter_text, self._sort_field, self._sort_direction)
        self._visible_pids = [proc.pid for proc in view]

        try:
            table = self.query_one("#process-table", DataTable)
        except NoMatches:
            return
        selected = self.selected_pid()

        table.clear()
        for proc in view:
            table.add_row(
                str(proc.pid),
                proc.owner[:12],
                f"{proc.cpu_percent:5.1f}",
                format_bytes(proc.memory_bytes),
                proc.command[:50],
                key=str(proc.pid),
            )

        if selected is not None and selected in self._visible_pids:
            table.move_cursor(row=self._visible_pids.index(selected))


class TasktopApp(App):
    """Main tasktop application."""

    TITLE = "tasktop"
    SUB_TITLE = "Process Monitor"

    CSS = """
    Screen {
        layout: vertical;
    }

    #history-stats {
        dock: top;
        height: auto;
    }

    Horizontal {
        height: auto;
    }

    #cpu-info {
        width: 1fr;
        padding-right: 2;
    }

    #mem-info {
        width: 1fr;
        padding-left: 2;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("f6", "sort", "Sort"),
        ("slash", "search", "Search"),
        ("k", "kill", "Kill"),
        ("r", "refresh", "Refresh"),
        ("g", "toggle_graphs", "Graphs"),
    ]

    def __init__(
        self,
        config: MonitorConfig | None = None,
        source: SnapshotSource | None = None,
        control: ProcessControl | None = None,
    ) -> None:
        """Initialize the TasktopApp."""
        super().__init__()
        self._config = config if config is not None else MonitorConfig()
        self._update_queue: Queue[SystemSnapshot] = Queue()
        self._monitor = SystemMonitor(self._update_queue, source=source, poll_rate=self._config.poll_rate)
        self._control = control if control is not None else ProcessControl()

    @property
    def monitor(self) -> SystemMonitor:
        """The background refresh driver."""
        return self._monitor

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield HistoryStats(id="history-stats", spike_threshold=self._config.spike_threshold)
        yield Input(placeholder="Search by PID or Command...", id="filter")
        yield ProcessTable()
        yield Footer()

    def on_mount(self) -> None:
        """Start the system monitor when the app is mounted."""
        self._monitor.start()
        self.query_one("#process-table", DataTable).focus()
        self.set_interval(0.5, self._check_for_updates)

    def _check_for_updates(self) -> None:
        """Drain the queue and show the most recent snapshot."""
        snapshot = None
        while True:
            try:
                snapshot = self._update_queue.get_nowait()
            except Empty:
                break

        if snapshot is not None:
            self._update_ui(snapshot)

    def _update_ui(self, snapshot: SystemSnapshot) -> None:
        """Update the UI with the new system snapshot."""
        self.query_one("#history-stats", HistoryStats).update_histories(
            snapshot.cpu_history, snapshot.memory_history
        )
        self.query_one(ProcessTable).update_processes(snapshot.processes)

    def on_input_changed(self, event: Input.Changed) -> None:
        """Re-filter the table as the search text changes."""
        self.query_one(ProcessTable).set_filter(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Hand focus back to the table."""
        self.query_one("#process-table", DataTable).focus()

    def action_sort(self) -> None:
        """Cycle through sort fields."""
        process_table = self.query_one(ProcessTable)
        field = process_table.cycle_sort()
        self.notify(f"Sort: {field.value.upper()} {process_table.sort_direction.value}")

    def action_search(self) -> None:
        """Focus the search box."""
        self.query_one("#filter", Input).focus()

    def action_kill(self) -> None:
        """Terminate the highlighted process, then refresh."""
        pid = self.query_one(ProcessTable).selected_pid()
        if pid is None:
            return
        try:
            self._control.kill(pid)
        except KillError as e:
            self.notify(str(e), severity="error")
        else:
            self.notify(f"Process {pid} killed successfully.")
        self._monitor.request_refresh()

    def action_refresh(self) -> None:
        """Refresh now instead of waiting for the timer."""
        self._monitor.request_refresh()

    def action_toggle_graphs(self) -> None:
        """Show or hide the history sparklines."""
        header = self.query_one("#history-stats", HistoryStats)
        header.display = not header.display

    def action_quit(self) -> None:
        """Handle quit action with graceful cleanup."""
        self._monitor.stop()
        self.exit()


def run_app(config: MonitorConfig | None = None) -> None:
    """Run the interactive display until the user quits."""
    app = TasktopApp(config)
    try:
        app.run()
    finally:
        app.monitor.stop()
