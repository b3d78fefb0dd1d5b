# ui/routines_view.py
import tkinter as tk
import tkinter.messagebox as mbox
from tkinter import ttk

from models import ALL_DAYS, TIME_OF_DAY_ORDER, WEEK
from ui import theme


class RoutinesView(tk.Frame):
    def __init__(self, parent, controller):
        super().__init__(parent, bg=theme.BG)
        self.controller = controller

        main = theme.card(self, glass=True)
        main.pack(fill="both", expand=True, padx=16, pady=14)

        header = tk.Frame(main, bg=main.cget("bg"))
        header.pack(fill="x", padx=12, pady=(12, 6))
        theme.heading_label(header, "Routines", theme.TITLE).pack(side="left", anchor="w")

        theme.muted_label(
            main,
            "Click a routine to edit it. Routines on all seven days show up as daily routines.",
            wrap=700,
        ).pack(anchor="w", padx=12, pady=(0, 8))

        controls = tk.Frame(main, bg=main.cget("bg"))
        controls.pack(fill="x", padx=12, pady=(0, 10))
        theme.ghost_button(controls, "Calendar", lambda: controller.show("CalendarView")).pack(
            side="left", padx=(0, 8)
        )
        theme.primary_button(controls, "Add Routine", lambda: self.open_form(None)).pack(
            side="left", padx=8
        )

        self.list_frame = tk.Frame(main, bg=main.cget("bg"))
        self.list_frame.pack(fill="both", expand=True, padx=12, pady=(4, 6))

    def refresh(self):
        for w in self.list_frame.winfo_children():
            w.destroy()

        routines = self.controller.session.routines
        if not routines:
            empty = theme.card(self.list_frame, glass=True)
            empty.pack(fill="x", pady=6, padx=2)
            tk.Label(
                empty,
                text="No routines yet.",
                font=theme.HEADING,
                bg=empty.cget("bg"),
                fg=theme.TEXT,
            ).pack(anchor="w", padx=12, pady=(10, 2))
            theme.muted_label(
                empty, "Add one to get started!", wrap=700
            ).pack(anchor="w", padx=12, pady=(0, 12))
            return

        for routine in routines:
            row = tk.Frame(
                self.list_frame,
                bg=theme.CARD_BG,
                highlightthickness=1,
                highlightbackground=routine.color,
                padx=12,
                pady=8,
                cursor="hand2",
            )
            row.pack(fill="x", pady=4)
            icon = tk.Label(
                row, text=routine.icon, font=theme.HEADING, bg=theme.HILITE, fg=routine.color, width=3
            )
            icon.pack(side="left")
            info = tk.Frame(row, bg=row.cget("bg"))
            info.pack(side="left", fill="x", expand=True, padx=10)
            name = theme.heading_label(info, routine.name, theme.SUBTITLE)
            name.pack(anchor="w")
            if routine.description:
                theme.muted_label(info, routine.description, font=theme.SMALL, wrap=480).pack(anchor="w")
            theme.pill(row, f"{routine.times_per_week}x/wk").pack(side="right")

            for widget in (row, icon, info, name):
                widget.bind("<Button-1>", lambda _e, r=routine: self.open_form(r))

    def open_form(self, routine):
        RoutineForm(self, self.controller.store, routine)


class RoutineForm(tk.Toplevel):
    """Create / edit / delete dialog for one routine."""

    def __init__(self, parent, store, routine=None):
        super().__init__(parent, bg=theme.CARD_BG)
        self.store = store
        self.routine = routine
        self.title("Edit Routine" if routine else "New Routine")
        self.transient(parent.winfo_toplevel())
        self.resizable(False, False)

        self.color = routine.color if routine else theme.COLORS[0]
        self.icon = routine.icon if routine else theme.ICONS[0]

        form = tk.Frame(self, bg=theme.CARD_BG)
        form.pack(fill="both", expand=True, padx=16, pady=14)
        form.columnconfigure(1, weight=1)

        self.name = self._entry(form, 0, "Name", routine.name if routine else "")
        self.description = self._entry(
            form, 1, "Description", routine.description if routine else ""
        )

        self._label(form, 2, "Days")
        days_row = tk.Frame(form, bg=theme.CARD_BG)
        days_row.grid(row=2, column=1, sticky="w", padx=8, pady=4)
        selected = set(routine.days) if routine else set(ALL_DAYS)
        self.day_vars = []
        for day in ALL_DAYS:
            var = tk.BooleanVar(value=day in selected)
            tk.Checkbutton(
                days_row,
                text=WEEK[day],
                variable=var,
                bg=theme.CARD_BG,
                fg=theme.TEXT,
                selectcolor=theme.HILITE,
                activebackground=theme.CARD_BG,
                font=theme.SMALL,
            ).pack(side="left")
            self.day_vars.append(var)

        self._label(form, 3, "Time of day")
        self.time_of_day = ttk.Combobox(
            form, values=sorted(TIME_OF_DAY_ORDER, key=TIME_OF_DAY_ORDER.get), state="readonly"
        )
        self.time_of_day.set(routine.time_of_day if routine else "allday")
        self.time_of_day.grid(row=3, column=1, sticky="ew", padx=8, pady=4)

        self._label(form, 4, "Color")
        self.color_row = tk.Frame(form, bg=theme.CARD_BG)
        self.color_row.grid(row=4, column=1, sticky="w", padx=8, pady=4)
        self._label(form, 5, "Icon")
        self.icon_row = tk.Frame(form, bg=theme.CARD_BG)
        self.icon_row.grid(row=5, column=1, sticky="w", padx=8, pady=4)
        self._build_pickers()

        controls = tk.Frame(form, bg=theme.CARD_BG)
        controls.grid(row=6, column=0, columnspan=2, sticky="ew", pady=(12, 0))
        theme.primary_button(controls, "Save", self.save).pack(side="left")
        theme.ghost_button(controls, "Cancel", self.destroy).pack(side="left", padx=8)
        if routine:
            theme.danger_button(controls, "Delete", self.delete).pack(side="right")

        self.bind("<Return>", lambda _e: self.save())
        self.bind("<Escape>", lambda _e: self.destroy())
        self.name.focus_set()
        self.grab_set()

    def _label(self, parent, row, text):
        tk.Label(
            parent, text=text, bg=theme.CARD_BG, fg=theme.TEXT, font=theme.BODY
        ).grid(row=row, column=0, sticky="w", pady=4)

    def _entry(self, parent, row, label, value):
        self._label(parent, row, label)
        entry = tk.Entry(
            parent,
            bg=theme.HILITE,
            fg=theme.TEXT,
            insertbackground=theme.TEXT,
            relief="flat",
            font=theme.BODY,
        )
        entry.insert(0, value)
        entry.grid(row=row, column=1, sticky="ew", padx=8, pady=4)
        return entry

    def _build_pickers(self):
        for frame in (self.color_row, self.icon_row):
            for w in frame.winfo_children():
                w.destroy()
        for i, color in enumerate(theme.COLORS):
            tk.Button(
                self.color_row,
                text=theme.CHECK_MARK if color == self.color else " ",
                width=2,
                bg=color,
                activebackground=color,
                relief="flat",
                bd=0,
                command=lambda c=color: self._pick(color=c),
            ).grid(row=0, column=i, padx=1)
        for i, icon in enumerate(theme.ICONS):
            tk.Button(
                self.icon_row,
                text=icon,
                width=2,
                bg=theme.ACCENT if icon == self.icon else theme.HILITE,
                fg=theme.TEXT,
                relief="flat",
                bd=0,
                command=lambda ic=icon: self._pick(icon=ic),
            ).grid(row=i // 8, column=i % 8, padx=1, pady=1)

    def _pick(self, color=None, icon=None):
        if color:
            self.color = color
        if icon:
            self.icon = icon
        self._build_pickers()

    def fields(self) -> dict:
        return {
            "name": self.name.get().strip(),
            "description": self.description.get().strip(),
            "days": [day for day, var in zip(ALL_DAYS, self.day_vars) if var.get()],
            "timeOfDay": self.time_of_day.get() or "allday",
            "color": self.color,
            "icon": self.icon,
        }

    def save(self):
        fields = self.fields()
        if not fields["name"]:
            return
        if self.routine:
            self.store.update_routine(self.routine.id, fields)
        else:
            self.store.create_routine(fields)
        self.destroy()

    def delete(self):
        if not mbox.askyesno(
            "Delete routine?",
            "Are you sure you want to delete this routine?\nIts completion history goes too.",
            parent=self,
        ):
            return
        self.store.delete_routine(self.routine.id)
        self.destroy()
