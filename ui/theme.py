"""Shared visual style helpers for the Tk UI (night-sky quest palette)."""

import tkinter as tk

# Palette
BG = "#14121f"
CARD_BG = "#1e1b2e"
GLASS_BG = "#252238"
BORDER = "#35304d"
TEXT = "#ece9f7"
MUTED = "#9a94b8"
ACCENT = "#7c6ff7"       # violet
ACCENT_DARK = "#5d51d6"
SUCCESS = "#34d399"      # mint
DANGER = "#f87171"       # coral
WARNING = "#facc15"
HILITE = "#2e2a47"
TODAY = "#3b3566"

# Sync indicator dot colors
SYNC_COLORS = {
    "disconnected": MUTED,
    "connecting": MUTED,
    "synced": SUCCESS,
    "syncing": WARNING,
    "error": DANGER,
}

# Routine form choices
COLORS = [
    "#7c6ff7", "#3b82f6", "#06b6d4", "#34d399", "#a3e635",
    "#facc15", "#fb923c", "#f87171", "#e879f9", "#f472b6",
]
ICONS = [
    "\U0001F9B7", "\U0001F3CB", "\U0001F4DA", "\U0001F3B5", "\U0001F9D8",
    "☕", "\U0001F4A7", "\U0001F48A", "\U0001F333", "\U0001F6B6",
    "\U0001F9F9", "\U0001F37D", "\U0001F4BB", "\U0001F6CC", "⭐",
]
CHECK_MARK = "✓"
REWARD = "\U0001F3C6"

# Typography
FONT_FAMILY = "Helvetica"
TITLE = (FONT_FAMILY, 20, "bold")
SUBTITLE = (FONT_FAMILY, 12)
HEADING = (FONT_FAMILY, 13, "bold")
BODY = (FONT_FAMILY, 11)
SMALL = (FONT_FAMILY, 9)
BUTTON = (FONT_FAMILY, 10, "bold")


def card(parent, glass: bool = False, **kwargs):
    """Lightweight card frame with border."""
    bg_color = GLASS_BG if glass else CARD_BG
    return tk.Frame(
        parent,
        bg=bg_color,
        bd=0,
        highlightbackground=BORDER,
        highlightthickness=1,
        **kwargs,
    )


def heading_label(parent, text, font=TITLE):
    return tk.Label(parent, text=text, bg=parent.cget("bg"), fg=TEXT, font=font)


def muted_label(parent, text, font=BODY, wrap=None):
    return tk.Label(
        parent,
        text=text,
        bg=parent.cget("bg"),
        fg=MUTED,
        font=font,
        justify="left",
        wraplength=wrap,
        anchor="w",
    )


def primary_button(parent, text, command):
    return tk.Button(
        parent,
        text=text,
        command=command,
        bg=ACCENT,
        fg=TEXT,
        activebackground=ACCENT_DARK,
        activeforeground=TEXT,
        relief="flat",
        bd=0,
        font=BUTTON,
        padx=14,
        pady=8,
        cursor="hand2",
        highlightthickness=0,
    )


def ghost_button(parent, text, command):
    return tk.Button(
        parent,
        text=text,
        command=command,
        bg=CARD_BG,
        fg=ACCENT,
        activebackground=HILITE,
        activeforeground=TEXT,
        relief="solid",
        bd=1,
        highlightbackground=ACCENT,
        font=BUTTON,
        padx=12,
        pady=7,
        cursor="hand2",
    )


def danger_button(parent, text, command):
    return tk.Button(
        parent,
        text=text,
        command=command,
        bg=DANGER,
        fg="#ffffff",
        activebackground=DANGER,
        activeforeground="#ffffff",
        relief="flat",
        bd=0,
        font=BUTTON,
        padx=12,
        pady=7,
        cursor="hand2",
    )


def pill(parent, text, fg=ACCENT, bg=HILITE):
    """Small tag-style label."""
    return tk.Label(
        parent,
        text=text,
        bg=bg,
        fg=fg,
        font=(FONT_FAMILY, 9, "bold"),
        padx=8,
        pady=2,
    )
