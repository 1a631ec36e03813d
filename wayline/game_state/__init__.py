"""Session state management module."""

from wayline.game_state.session_controller import HELP_LINES, SessionController

__all__ = [
    "HELP_LINES",
    "SessionController",
]
