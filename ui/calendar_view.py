# ui/calendar_view.py (Calendar screen)
import tkinter as tk

from models import WEEK
from ui import theme

CELL_WIDTH = 104
CELL_HEIGHT = 78
PATH_WIDTH = 700
PATH_HEIGHT = 70


class CalendarView(tk.Frame):
    def __init__(self, parent, controller):
        super().__init__(parent, bg=theme.BG)
        self.controller = controller
        self.session = controller.session

        main = theme.card(self, glass=True)
        main.pack(fill="both", expand=True, padx=16, pady=14)

        # Header: month navigation + sync indicator
        header = tk.Frame(main, bg=main.cget("bg"))
        header.pack(fill="x", padx=12, pady=(12, 6))
        theme.ghost_button(header, "<", self.session.prev_month).pack(side="left")
        self.month_label = theme.heading_label(header, "", theme.TITLE)
        self.month_label.pack(side="left", padx=12)
        theme.ghost_button(header, ">", self.session.next_month).pack(side="left")

        sync_box = tk.Frame(header, bg=main.cget("bg"))
        sync_box.pack(side="right")
        self.sync_dot = tk.Label(
            sync_box, text="●", font=theme.HEADING, bg=main.cget("bg"), fg=theme.MUTED
        )
        self.sync_dot.pack(side="left")
        self.sync_label = theme.muted_label(sync_box, "Connecting...")
        self.sync_label.pack(side="left", padx=(4, 0))

        controls = tk.Frame(main, bg=main.cget("bg"))
        controls.pack(fill="x", padx=12, pady=(0, 8))
        theme.primary_button(controls, "Routines", lambda: controller.show("RoutinesView")).pack(
            side="left"
        )

        # Weekday header + grid
        self.grid_frame = tk.Frame(main, bg=main.cget("bg"))
        self.grid_frame.pack(padx=12, pady=(4, 6))

        self.legend_frame = tk.Frame(main, bg=main.cget("bg"))
        self.legend_frame.pack(fill="x", padx=12, pady=(2, 6))

        self.everyday_frame = tk.Frame(main, bg=main.cget("bg"))
        self.everyday_frame.pack(fill="x", padx=12, pady=(2, 6))

        quest = theme.card(main)
        quest.pack(fill="x", padx=12, pady=(6, 12))
        theme.heading_label(quest, "Quest Path", theme.HEADING).pack(anchor="w", padx=10, pady=(8, 0))
        self.quest_canvas = tk.Canvas(
            quest, width=PATH_WIDTH, height=PATH_HEIGHT, bg=theme.CARD_BG, highlightthickness=0
        )
        self.quest_canvas.pack(padx=10, pady=(4, 4))
        self.quest_note = theme.muted_label(quest, "", wrap=PATH_WIDTH)
        self.quest_note.pack(anchor="w", padx=10, pady=(0, 8))

    # ---------- Sync indicator ----------
    def set_sync_status(self, status: str, label: str):
        self.sync_dot.configure(fg=theme.SYNC_COLORS.get(status, theme.MUTED))
        self.sync_label.configure(text=label)

    # ---------- Render ----------
    def refresh(self):
        self.month_label.configure(text=self.session.label)
        self._render_grid()
        self._render_legend()
        self._render_everyday()
        self._render_quest()

    def _clear(self, frame):
        for w in frame.winfo_children():
            w.destroy()

    def _render_grid(self):
        self._clear(self.grid_frame)
        bg = self.grid_frame.cget("bg")
        for col, name in enumerate(WEEK):
            tk.Label(
                self.grid_frame, text=name, font=theme.BUTTON, bg=bg, fg=theme.MUTED
            ).grid(row=0, column=col, pady=(0, 4))

        month_grid = self.session.grid()
        for r, row in enumerate(month_grid.rows(), start=1):
            for col, cell in enumerate(row):
                self._render_cell(r, col, cell)

    def _render_cell(self, row: int, col: int, cell):
        box = tk.Frame(
            self.grid_frame,
            width=CELL_WIDTH,
            height=CELL_HEIGHT,
            bg=theme.CARD_BG if cell else self.grid_frame.cget("bg"),
            highlightthickness=1 if cell else 0,
            highlightbackground=theme.ACCENT if cell and cell.is_today else theme.BORDER,
        )
        box.grid(row=row, column=col, padx=2, pady=2)
        box.grid_propagate(False)
        if cell is None:
            return
        if cell.is_today:
            box.configure(bg=theme.TODAY)

        tk.Label(
            box, text=str(cell.day), font=theme.SMALL, bg=box.cget("bg"), fg=theme.TEXT
        ).place(x=4, y=2)

        checks = tk.Frame(box, bg=box.cget("bg"))
        checks.place(x=4, y=22)
        for i, check in enumerate(cell.inline):
            routine = check.routine
            btn = tk.Button(
                checks,
                text=theme.CHECK_MARK if check.done else routine.icon,
                font=theme.SMALL,
                width=2,
                bg=routine.color if check.done else theme.HILITE,
                fg=theme.BG if check.done else theme.TEXT,
                activebackground=routine.color,
                relief="flat",
                bd=0,
                cursor="hand2",
                command=lambda d=cell.date, rid=routine.id: self.session.toggle(d, rid),
            )
            btn.grid(row=i // 4, column=i % 4, padx=1, pady=1)

    def _render_legend(self):
        self._clear(self.legend_frame)
        bg = self.legend_frame.cget("bg")
        for entry in self.session.legend():
            item = tk.Frame(self.legend_frame, bg=bg)
            item.pack(side="left", padx=(0, 12))
            tk.Label(item, text="●", fg=entry.color, bg=bg, font=theme.BODY).pack(side="left")
            theme.muted_label(item, entry.caption, font=theme.SMALL).pack(side="left")

    def _render_everyday(self):
        self._clear(self.everyday_frame)
        rows = self.session.everyday()
        if not rows:
            return
        theme.heading_label(self.everyday_frame, "Daily Routines", theme.HEADING).pack(anchor="w")
        for entry in rows:
            routine = entry.routine
            row = theme.card(self.everyday_frame)
            row.pack(fill="x", pady=3)
            tk.Label(
                row, text=routine.icon, font=theme.HEADING, bg=row.cget("bg"), fg=routine.color
            ).pack(side="left", padx=8, pady=6)
            info = tk.Frame(row, bg=row.cget("bg"))
            info.pack(side="left", fill="x", expand=True)
            theme.heading_label(info, routine.name, theme.BODY).pack(anchor="w")
            if routine.description:
                theme.muted_label(info, routine.description, font=theme.SMALL, wrap=520).pack(anchor="w")
            if entry.date is None:
                continue
            tk.Button(
                row,
                text=theme.CHECK_MARK if entry.done_today else " ",
                width=3,
                font=theme.BUTTON,
                bg=routine.color if entry.done_today else theme.HILITE,
                fg=theme.BG,
                relief="flat",
                bd=0,
                cursor="hand2",
                command=lambda d=entry.date, rid=routine.id: self.session.toggle(d, rid),
            ).pack(side="right", padx=8)

    def _render_quest(self):
        canvas = self.quest_canvas
        canvas.delete("all")
        weeks = self.session.weeks()
        stats = self.session.milestones()
        left, right, mid = 24, PATH_WIDTH - 56, PATH_HEIGHT // 2
        span = right - left

        canvas.create_line(left, mid, right, mid, fill=theme.BORDER, width=6, capstyle="round")
        marker_x = left + span * stats.progress_ratio
        canvas.create_line(left, mid, marker_x, mid, fill=theme.ACCENT, width=6, capstyle="round")

        for i, week in enumerate(weeks, start=1):
            x = left + span * i / len(weeks)
            if week.is_complete:
                fill = theme.SUCCESS
            elif week.has_work:
                fill = theme.HILITE
            else:
                fill = theme.BORDER
            canvas.create_oval(x - 12, mid - 12, x + 12, mid + 12, fill=fill, outline=theme.ACCENT)
            canvas.create_text(x, mid, text=str(week.week_number), fill=theme.TEXT, font=theme.SMALL)
            canvas.create_text(
                x, mid + 24, text=f"{week.completed}/{week.expected}", fill=theme.MUTED, font=theme.SMALL
            )

        reward_color = theme.WARNING if stats.reward_earned else theme.MUTED
        canvas.create_text(right + 30, mid, text=theme.REWARD, fill=reward_color, font=theme.TITLE)

        if stats.reward_earned:
            note = "Every week complete. Reward unlocked!"
        elif stats.weeks_with_work_count == 0:
            note = "No routines scheduled this month."
        else:
            note = f"{stats.completed_weeks_count} of {stats.weeks_with_work_count} weeks complete."
        self.quest_note.configure(text=note)
