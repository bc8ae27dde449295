"""Theme configuration for the application."""

from textual.app import App

APP_CSS = """
#main {
    height: 1fr;
}

#packages {
    width: 2fr;
}

#side {
    width: 1fr;
}

#taps {
    height: 1fr;
}

#details {
    height: auto;
    padding: 1;
    border: round $accent;
}

#logs {
    height: 8;
    border-top: solid $accent;
}
"""


def set_theme(app: App) -> None:
    """Set the base colours for the application.

    Args:
        app (App): The Textual application instance.
    """
    app.styles.background = "black"
    app.styles.color = "white"
