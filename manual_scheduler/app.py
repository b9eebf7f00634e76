"""
Manual Task Scheduler GUI
=========================

A customtkinter front-end for the manual scheduler simulation. The player
acts as the operating system scheduler:

- Pick a task in the READY table and dispatch it onto the CPU (button or
  double-click). Every dispatch pays the context switch cost.
- Interrupt the running task to send it back to READY.
- Watch tasks block for I/O and return to READY on their own.
- Track efficiency, CPU idle time and waiting time per priority.

The window holds no scheduling rules: it renders ``Simulator`` snapshots and
fires ``Simulator.step()`` on a fixed cadence with ``after()``.
"""

import argparse
import logging
import tkinter as tk
from tkinter import messagebox, ttk
from typing import Dict, List, Optional, Sequence

import customtkinter as ctk

from manual_scheduler.config import SimulationConfig
from manual_scheduler.metrics import Metrics, PriorityBreakdown
from manual_scheduler.simulator import Simulator
from manual_scheduler.state import Snapshot
from manual_scheduler.tasks import Priority, Task


logger = logging.getLogger(__name__)


PRIORITY_COLORS: Dict[Priority, str] = {
    Priority.HIGH: "#EF4444",
    Priority.MEDIUM: "#EAB308",
    Priority.LOW: "#22C55E",
}

RUNNING_COLOR = "#4ADE80"
IDLE_COLOR = "#FACC15"
SWITCH_COLOR = "#F87171"


# ---------------------------------------------------------------------------
# Simple tooltip helper for Tk / customtkinter widgets
# ---------------------------------------------------------------------------


class _ToolTip:
    """Minimal tooltip for Tk / customtkinter widgets."""

    def __init__(self, widget: tk.Widget, text: str) -> None:
        self.widget = widget
        self.text = text
        self._tip_window: Optional[tk.Toplevel] = None
        widget.bind("<Enter>", self._on_enter)
        widget.bind("<Leave>", self._on_leave)

    def _on_enter(self, _event: tk.Event) -> None:
        if self._tip_window is not None:
            return
        x = self.widget.winfo_rootx() + 20
        y = self.widget.winfo_rooty() + self.widget.winfo_height() + 5
        self._tip_window = tw = tk.Toplevel(self.widget)
        tw.wm_overrideredirect(True)
        tw.wm_geometry(f"+{x}+{y}")
        tk.Label(
            tw,
            text=self.text,
            justify="left",
            background="#111827",
            foreground="#F9FAFB",
            relief="solid",
            borderwidth=1,
            font=("Segoe UI", 9),
            padx=4,
            pady=2,
        ).pack(ipadx=1)

    def _on_leave(self, _event: tk.Event) -> None:
        if self._tip_window is not None:
            self._tip_window.destroy()
            self._tip_window = None


# ---------------------------------------------------------------------------
# GUI Application
# ---------------------------------------------------------------------------


# (column key, heading, width) per status table.
_READY_COLUMNS = (
    ("id", "Task", 60),
    ("priority", "Priority", 70),
    ("remaining", "Remaining", 80),
    ("io", "I/O In", 60),
    ("waiting", "Waiting", 70),
)
_RUNNING_COLUMNS = (
    ("id", "Task", 60),
    ("priority", "Priority", 70),
    ("remaining", "Remaining", 80),
    ("io", "I/O In", 60),
    ("quantum", "Elapsed", 70),
)
_BLOCKED_COLUMNS = (
    ("id", "Task", 60),
    ("priority", "Priority", 70),
    ("remaining", "Remaining", 80),
    ("timer", "I/O Timer", 70),
)
_TERMINATED_COLUMNS = (
    ("id", "Task", 60),
    ("priority", "Priority", 70),
    ("waiting", "Waiting", 70),
    ("execution", "Elapsed", 70),
)


class ManualSchedulerApp:
    """
    customtkinter window for the manual scheduler.

    High-level structure:
        - Header: title, theme toggle and the rules window.
        - Controls: restart, new task, quantum and context switch cost.
        - Metrics: efficiency, time distribution bar, per-priority averages.
        - Status area: READY / RUNNING / BLOCKED / TERMINATED tables.
        - Event log.
    """

    def __init__(self, simulator: Simulator, root: Optional[ctk.CTk] = None) -> None:
        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("dark-blue")

        if root is None:
            root = ctk.CTk()
        self.root = root
        self.root.title("Manual Task Scheduler")
        self.root.geometry("1200x820")

        self.simulator = simulator
        self._appearance_var = ctk.StringVar(value="Dark")
        self._help_window: Optional[ctk.CTkToplevel] = None
        self._timer_job: Optional[str] = None

        self._configure_treeview_style()
        self._build_ui()
        self.refresh()

    def _configure_treeview_style(self) -> None:
        """Apply a dark theme to ttk Treeview widgets so they match customtkinter."""
        style = ttk.Style(self.root)
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass

        style.configure(
            "Treeview",
            background="#020617",
            foreground="#E5E7EB",
            fieldbackground="#020617",
            bordercolor="#1F2937",
            borderwidth=1,
            rowheight=22,
        )
        style.map(
            "Treeview",
            background=[("selected", "#1D4ED8")],
            foreground=[("selected", "#F9FAFB")],
        )
        style.configure(
            "Treeview.Heading",
            background="#0F172A",
            foreground="#E5E7EB",
            font=("Segoe UI Semibold", 9),
        )

    def _on_theme_changed(self, mode: str) -> None:
        ctk.set_appearance_mode(mode.lower())
        self._configure_treeview_style()

    def _show_help_window(self) -> None:
        """Open a window explaining the rules of the game."""
        if self._help_window is not None:
            try:
                self._help_window.lift()
                return
            except tk.TclError:
                self._help_window = None

        help_win = self._help_window = ctk.CTkToplevel(self.root)
        help_win.title("Kernel Scheduler Interface – Rules")
        help_win.geometry("640x460")

        container = ctk.CTkScrollableFrame(help_win, corner_radius=0)
        container.pack(fill="both", expand=True, padx=12, pady=12)

        text_blocks = [
            (
                "Your role as the scheduler",
                "You decide which task uses the CPU. The simulation pauses when a "
                "decision is required.\n"
                "Action: select a READY task and dispatch it to RUNNING.\n"
                "Cost: every dispatch adds the context switch cost to global time.",
            ),
            (
                "Task life cycle",
                "Interrupt: the running task returns to READY and waits for its next turn.\n"
                "I/O event: when its I/O countdown runs out the task moves to BLOCKED "
                "and returns to READY by itself once the I/O completes.",
            ),
            (
                "Priorities",
                "Red tasks are high priority and should be favoured. Watch the "
                "per-priority waiting times so urgent tasks do not sit idle.",
            ),
            (
                "Performance metrics",
                "Efficiency E = CPU busy time / global time.\n"
                "CPU idle time = global time - busy time - context switch time.",
            ),
        ]

        for heading, body in text_blocks:
            ctk.CTkLabel(container, text=heading, font=("Segoe UI Semibold", 14)).pack(
                anchor="w", pady=(10, 2)
            )
            ctk.CTkLabel(
                container, text=body, font=("Segoe UI", 11), justify="left", wraplength=560
            ).pack(anchor="w")

        ctk.CTkButton(container, text="Close", width=100, command=help_win.destroy).pack(
            anchor="e", pady=(16, 0)
        )

    # ------------------------------------------------------------------#
    # UI construction                                                   #
    # ------------------------------------------------------------------#

    def _build_ui(self) -> None:
        main_frame = ctk.CTkScrollableFrame(self.root, corner_radius=0, fg_color="transparent")
        main_frame.pack(fill="both", expand=True, padx=16, pady=16)

        header_frame = ctk.CTkFrame(main_frame, fg_color="transparent")
        header_frame.pack(fill="x", pady=(0, 10))

        title_left = ctk.CTkFrame(header_frame, fg_color="transparent")
        title_left.pack(side="left", fill="x", expand=True)
        ctk.CTkLabel(title_left, text="Manual Task Scheduler", font=("Segoe UI Semibold", 22)).pack(
            anchor="w"
        )
        ctk.CTkLabel(
            title_left, text="You are the scheduler: dispatch, interrupt, keep the CPU busy",
            font=("Segoe UI", 12),
        ).pack(anchor="w")

        title_right = ctk.CTkFrame(header_frame, fg_color="transparent")
        title_right.pack(side="right")
        ctk.CTkSegmentedButton(
            title_right,
            values=["Dark", "Light"],
            variable=self._appearance_var,
            width=140,
            command=self._on_theme_changed,
        ).pack(side="right", padx=(0, 8))
        ctk.CTkButton(title_right, text="Rules", width=90, command=self._show_help_window).pack(
            side="right", padx=(0, 8)
        )

        self._build_metrics_section(main_frame)
        self._build_control_section(main_frame)
        self._build_status_section(main_frame)
        self._build_log_section(main_frame)

    def _build_control_section(self, parent: ctk.CTkFrame) -> None:
        frame = ctk.CTkFrame(parent, corner_radius=12)
        frame.pack(fill="x", pady=(10, 10))

        self.feedback_label = ctk.CTkLabel(frame, text="", font=("Segoe UI Semibold", 16))
        self.feedback_label.grid(row=0, column=0, columnspan=8, padx=12, pady=(10, 6), sticky="w")

        restart_btn = ctk.CTkButton(frame, text="Restart", width=90, command=self.restart)
        restart_btn.grid(row=1, column=0, padx=(12, 6), pady=(0, 10))
        _ToolTip(restart_btn, "Reset to the five-task starting workload.")

        new_task_btn = ctk.CTkButton(frame, text="New Task", width=90, command=self.create_task)
        new_task_btn.grid(row=1, column=1, padx=6, pady=(0, 10))
        _ToolTip(new_task_btn, "Add a random task to the READY queue.")

        ctk.CTkLabel(frame, text="Quantum").grid(row=1, column=2, padx=(18, 4), pady=(0, 10))
        self.quantum_entry = ctk.CTkEntry(frame, width=60)
        self.quantum_entry.grid(row=1, column=3, padx=4, pady=(0, 10))

        ctk.CTkLabel(frame, text="Context Switch Cost").grid(row=1, column=4, padx=(18, 4), pady=(0, 10))
        self.cost_entry = ctk.CTkEntry(frame, width=60)
        self.cost_entry.grid(row=1, column=5, padx=4, pady=(0, 10))

        apply_btn = ctk.CTkButton(frame, text="Apply", width=80, command=self.apply_settings)
        apply_btn.grid(row=1, column=6, padx=(8, 6), pady=(0, 10))

        snapshot = self.simulator.snapshot()
        self.quantum_entry.insert(0, str(snapshot.quantum))
        self.cost_entry.insert(0, str(snapshot.context_switch_cost))

    def _build_metrics_section(self, parent: ctk.CTkFrame) -> None:
        frame = ctk.CTkFrame(parent, corner_radius=12)
        frame.pack(fill="x")

        ctk.CTkLabel(frame, text="Performance Metrics", font=("Segoe UI Semibold", 13)).pack(
            anchor="w", padx=12, pady=(10, 4)
        )

        self.efficiency_label = ctk.CTkLabel(frame, text="", font=("Segoe UI Semibold", 20))
        self.efficiency_label.pack(anchor="w", padx=12)

        self.times_label = ctk.CTkLabel(frame, text="", font=("Segoe UI", 11))
        self.times_label.pack(anchor="w", padx=12, pady=(2, 6))

        self.distribution_canvas = tk.Canvas(frame, height=26, bg="#020617", highlightthickness=0)
        self.distribution_canvas.pack(fill="x", padx=12, pady=(0, 6))

        self.averages_label = ctk.CTkLabel(frame, text="", font=("Segoe UI", 11), justify="left")
        self.averages_label.pack(anchor="w", padx=12, pady=(0, 10))

    def _build_status_section(self, parent: ctk.CTkFrame) -> None:
        frame = ctk.CTkFrame(parent, corner_radius=12)
        frame.pack(fill="both", expand=True, pady=(0, 10))
        for column in range(4):
            frame.grid_columnconfigure(column, weight=1)

        self.ready_tree = self._build_status_table(frame, 0, "READY", _READY_COLUMNS)
        self.running_tree = self._build_status_table(frame, 1, "RUNNING", _RUNNING_COLUMNS)
        self.blocked_tree = self._build_status_table(frame, 2, "BLOCKED", _BLOCKED_COLUMNS)
        self.terminated_tree = self._build_status_table(frame, 3, "TERMINATED", _TERMINATED_COLUMNS)

        self.ready_tree.bind("<Double-1>", lambda _event: self.dispatch_selected())

        self.dispatch_button = ctk.CTkButton(
            frame, text="Dispatch ▶", width=120, command=self.dispatch_selected
        )
        self.dispatch_button.grid(row=2, column=0, padx=12, pady=(0, 10), sticky="w")
        _ToolTip(self.dispatch_button, "Move the selected READY task onto the CPU.")

        self.interrupt_button = ctk.CTkButton(
            frame, text="⏸ Interrupt", width=120, fg_color="#B91C1C", command=self.interrupt
        )
        self.interrupt_button.grid(row=2, column=1, padx=12, pady=(0, 10), sticky="w")

        self.ready_wait_label = ctk.CTkLabel(frame, text="", font=("Segoe UI", 11))
        self.ready_wait_label.grid(row=2, column=2, columnspan=2, padx=12, pady=(0, 10), sticky="e")

    def _build_status_table(
        self, parent: ctk.CTkFrame, column: int, title: str, columns: Sequence[tuple]
    ) -> ttk.Treeview:
        ctk.CTkLabel(parent, text=title, font=("Segoe UI Semibold", 13)).grid(
            row=0, column=column, padx=12, pady=(10, 4), sticky="w"
        )
        tree = ttk.Treeview(
            parent, columns=[key for key, _, _ in columns], show="headings", height=8,
            selectmode="browse",
        )
        for key, heading, width in columns:
            tree.heading(key, text=heading)
            tree.column(key, anchor="center", width=width, stretch=True)
        for priority, color in PRIORITY_COLORS.items():
            tree.tag_configure(priority.name, foreground=color)
        tree.grid(row=1, column=column, padx=8, pady=(0, 8), sticky="nsew")
        return tree

    def _build_log_section(self, parent: ctk.CTkFrame) -> None:
        frame = ctk.CTkFrame(parent, corner_radius=12)
        frame.pack(fill="x")
        ctk.CTkLabel(frame, text="Event Log", font=("Segoe UI Semibold", 13)).pack(
            anchor="w", padx=12, pady=(10, 4)
        )
        self.log_box = ctk.CTkTextbox(frame, height=140, font=("Consolas", 11))
        self.log_box.pack(fill="x", padx=12, pady=(0, 10))

    # ------------------------------------------------------------------#
    # Player actions                                                    #
    # ------------------------------------------------------------------#

    def dispatch_selected(self) -> None:
        selection = self.ready_tree.selection()
        if not selection:
            return
        self.simulator.dispatch(selection[0])
        self.refresh()

    def interrupt(self) -> None:
        self.simulator.interrupt()
        self.refresh()

    def create_task(self) -> None:
        self.simulator.create_task()
        self.refresh()

    def restart(self) -> None:
        self.simulator.restart()
        self.refresh()

    def apply_settings(self) -> None:
        """Read quantum and context switch cost from the entries and apply them."""
        try:
            quantum = int(self.quantum_entry.get().strip())
            cost = int(self.cost_entry.get().strip())
        except ValueError:
            messagebox.showerror("Invalid input", "Quantum and context switch cost must be integers.")
            return

        try:
            self.simulator.configure(quantum, cost)
        except ValueError as exc:
            messagebox.showerror("Invalid input", str(exc))
            return
        self.refresh()

    # ------------------------------------------------------------------#
    # Rendering                                                         #
    # ------------------------------------------------------------------#

    def refresh(self) -> None:
        """Redraw every panel from a fresh snapshot."""
        snapshot = self.simulator.snapshot()
        self._render_feedback(snapshot)
        self._render_metrics(self.simulator.metrics())
        self._render_tables(snapshot)
        self._render_ready_waits(self.simulator.priority_wait_metrics())
        self._render_log(self.simulator.events())

        can_dispatch = snapshot.running_task is None and bool(snapshot.ready_queue)
        self.dispatch_button.configure(state="normal" if can_dispatch else "disabled")
        can_interrupt = snapshot.running_task is not None
        self.interrupt_button.configure(state="normal" if can_interrupt else "disabled")

    def _render_feedback(self, snapshot: Snapshot) -> None:
        text = snapshot.feedback
        if snapshot.running_task is not None:
            text += f"   |   TIME ELAPSED: {snapshot.running_task.quantum_used}/{snapshot.quantum}"
        color = "#FACC15" if snapshot.is_paused else "#4ADE80"
        self.feedback_label.configure(text=text, text_color=color)

    def _render_metrics(self, metrics: Metrics) -> None:
        if metrics.efficiency >= 80:
            color = "#4ADE80"
        elif metrics.efficiency >= 60:
            color = "#FACC15"
        else:
            color = "#F87171"
        self.efficiency_label.configure(text=f"Efficiency: {metrics.efficiency:.1f}%", text_color=color)
        self.times_label.configure(
            text=(
                f"Global Time: {metrics.global_time}  |  "
                f"CPU Running: {metrics.cpu_execution_time}  |  "
                f"CPU Idle: {metrics.cpu_idle_time}  |  "
                f"Context Switch: {metrics.context_switch_time}"
            )
        )
        self._draw_distribution(metrics)

        waiting = metrics.avg_waiting_time_by_priority
        executing = metrics.avg_execution_time_by_priority
        self.averages_label.configure(
            text=(
                f"Avg Waiting   {waiting.overall:5.1f}   "
                f"(High {waiting.high:.1f} · Medium {waiting.medium:.1f} · Low {waiting.low:.1f})\n"
                f"Avg Elapsed   {executing.overall:5.1f}   "
                f"(High {executing.high:.1f} · Medium {executing.medium:.1f} · Low {executing.low:.1f})"
            )
        )

    def _draw_distribution(self, metrics: Metrics) -> None:
        """Draw running / idle / context switch shares as one stacked bar."""
        canvas = self.distribution_canvas
        canvas.delete("all")
        width = int(canvas.winfo_width())
        if width <= 1:
            width = 800

        x = 0.0
        for share, color in (
            (metrics.running_share, RUNNING_COLOR),
            (metrics.idle_share, IDLE_COLOR),
            (metrics.context_switch_share, SWITCH_COLOR),
        ):
            span = width * share / 100
            if span > 0:
                canvas.create_rectangle(x, 2, x + span, 24, fill=color, outline="")
            x += span

    def _render_tables(self, snapshot: Snapshot) -> None:
        running: List[Task] = [snapshot.running_task] if snapshot.running_task else []
        self._fill(
            self.ready_tree,
            snapshot.ready_queue,
            lambda t: (t.id, t.priority.label, t.remaining_time, t.io_countdown, t.waiting_time),
        )
        self._fill(
            self.running_tree,
            running,
            lambda t: (t.id, t.priority.label, t.remaining_time, t.io_countdown, t.quantum_used),
        )
        self._fill(
            self.blocked_tree,
            snapshot.blocked_tasks,
            lambda t: (t.id, t.priority.label, t.remaining_time, t.io_timer),
        )
        self._fill(
            self.terminated_tree,
            snapshot.terminated_tasks,
            lambda t: (t.id, t.priority.label, t.waiting_time, t.execution_time),
        )

    @staticmethod
    def _fill(tree: ttk.Treeview, tasks: Sequence[Task], row) -> None:
        selected = tree.selection()
        tree.delete(*tree.get_children())
        for task in tasks:
            tree.insert("", "end", iid=task.id, values=row(task), tags=(task.priority.name,))
        keep = [iid for iid in selected if tree.exists(iid)]
        if keep:
            tree.selection_set(keep)

    def _render_ready_waits(self, waits: PriorityBreakdown) -> None:
        self.ready_wait_label.configure(
            text=(
                f"READY waiting  High {waits.high:.1f}  ·  "
                f"Medium {waits.medium:.1f}  ·  Low {waits.low:.1f}"
            )
        )

    def _render_log(self, events: List[str]) -> None:
        self.log_box.configure(state="normal")
        self.log_box.delete("1.0", tk.END)
        self.log_box.insert("1.0", "\n".join(events))
        self.log_box.configure(state="disabled")

    # ------------------------------------------------------------------#
    # Periodic driver                                                   #
    # ------------------------------------------------------------------#

    def _on_timer(self) -> None:
        cadence = self.simulator.step()
        logger.debug("Driver fired: %s", cadence.value)
        self.refresh()
        self._schedule_timer()

    def _schedule_timer(self) -> None:
        self._timer_job = self.root.after(self.simulator.config.tick_interval_ms, self._on_timer)

    def run(self) -> None:
        """Start the driver and the Tkinter main event loop."""
        self._schedule_timer()
        try:
            self.root.mainloop()
        finally:
            if self._timer_job is not None:
                try:
                    self.root.after_cancel(self._timer_job)
                except tk.TclError:
                    pass


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manual single-CPU task scheduler simulator")
    parser.add_argument("--quantum", type=int, default=5, help="Time slice shown to the player")
    parser.add_argument("--context-switch-cost", type=int, default=1, help="Ticks charged per dispatch")
    parser.add_argument("--tick-ms", type=int, default=1000, help="Milliseconds between clock ticks")
    parser.add_argument("--seed", type=int, default=None, help="Seed for random task generation")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for ``python -m manual_scheduler``."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = SimulationConfig(
            quantum=args.quantum,
            context_switch_cost=args.context_switch_cost,
            tick_interval_ms=args.tick_ms,
        )
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}")

    simulator = Simulator(config, seed=args.seed)
    simulator.restart()
    app = ManualSchedulerApp(simulator)
    app.run()


if __name__ == "__main__":
    main()
