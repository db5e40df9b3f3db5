from osiris_shell.console.display import Painter
from osiris_shell.console.state import GUEST, Session


def render_prompt(session: Session, painter: Painter, host_label: str) -> str:
    """Return the prompt for the current session, e.g. `[alice@osiris ~]$ `."""
    user = session.username if session.logged_in else GUEST
    return painter.success(f"[{user}@{host_label} ~]$ ")
