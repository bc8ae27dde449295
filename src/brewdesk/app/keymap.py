"""Key mappings for the brewdesk application."""

from textual.binding import Binding

KEYMAP = [
    Binding("q", "quit", "Quit"),
    Binding("r", "reload", "Reload"),
    Binding("t", "toggle_tag", "Tag"),
    Binding("u", "untap_selected", "Untap"),
    Binding("escape", "close_details", "Close details", show=False),
]
