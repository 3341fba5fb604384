"""Conversion of user messages into the HTML stored and sent to clients."""

import markdown
import nh3


def prepare_for_storage(content: str) -> str:
    """
    Render CommonMark-style Markdown (with tables) to HTML and sanitize it.

    Messages are stored already converted, so this runs once per message
    instead of once per delivery.
    """
    unsafe_html = markdown.markdown(content, extensions=["tables"])
    return nh3.clean(unsafe_html)


def sanitize_html(html: str) -> str:
    """Sanitize HTML written by admins, such as the welcome message."""
    return nh3.clean(html)
