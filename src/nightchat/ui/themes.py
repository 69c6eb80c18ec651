"""The NightChat colour theme, registered by the app on mount."""

from textual.theme import Theme

# Night palette: deep gray surfaces with indigo/purple accents
NIGHT = Theme(
    name="nightchat",
    primary="#818cf8",      # Indigo - own messages, sidebar
    secondary="#c084fc",    # Purple - contact messages
    accent="#f472b6",       # Pink - unread badges
    foreground="#e5e7eb",   # Light text
    background="#111827",   # Gray 900
    success="#34d399",      # Green
    warning="#fbbf24",      # Amber - log panel
    error="#f87171",        # Red - errors
    surface="#1f2937",      # Gray 800
    panel="#161e2e",
    dark=True,
    variables={
        "block-cursor-foreground": "#111827",
        "block-cursor-background": "#c084fc",
        "block-cursor-text-style": "bold",
        "block-hover-background": "#374151 40%",

        "input-cursor-background": "#e5e7eb",
        "input-cursor-foreground": "#111827",
        "input-selection-background": "#818cf8 30%",

        "border": "#374151",
        "border-blurred": "#1f2937",

        "scrollbar": "#1f2937",
        "scrollbar-hover": "#374151",
        "scrollbar-active": "#818cf8",
        "scrollbar-background": "#161e2e",

        "footer-foreground": "#9ca3af",
        "footer-background": "#111827",
        "footer-key-foreground": "#c084fc",
        "footer-key-background": "#1f2937",

        "text-muted": "#6b7280",
    },
)
