#!/usr/bin/env python3
"""
Response Interpretation

backpack.tf reports failures inside the page it renders, not through
status codes. These helpers read the alert and warning markup it uses.
"""

from typing import Optional, List

from bs4 import NavigableString, Tag

from .exceptions import DEFAULT_ERROR_MESSAGE
from .forms import Document

DANGER_ALERT = 'div.alert.alert-danger'
WARNING_ALERT = 'div.alert.alert-warning'
GENERATION_PROMPT = 'input[value="Generate my API key"]'


def _node_text(node) -> str:
    if isinstance(node, Tag):
        return node.get_text()
    if isinstance(node, NavigableString):
        return str(node)
    return ''


def classify_alert(document: Document, selector: str = DANGER_ALERT) -> Optional[str]:
    """
    Extract the message from an error alert

    The message is the last child node across every matching alert;
    anything before it is an icon, a label or an earlier alert.

    Args:
        document: Parsed page
        selector: CSS selector of the alert container

    Returns:
        The trimmed message (never blank), or None when there is no alert
    """
    alerts = document.select(selector)
    if not alerts:
        return None

    nodes = [node for alert in alerts for node in alert.contents]
    message = _node_text(nodes[-1]).strip() if nodes else ''
    return message or DEFAULT_ERROR_MESSAGE


def classify_warning_list(document: Document, selector: str = WARNING_ALERT) -> Optional[List[str]]:
    """
    Collect the list items of every warning alert, in document order

    Args:
        document: Parsed page
        selector: CSS selector of the warning container

    Returns:
        The text of each <li>, or None when there is no warning
    """
    alerts = document.select(selector)
    if not alerts:
        return None
    return [item.get_text().strip() for alert in alerts for item in alert.find_all('li')]


def join_warnings(warnings: List[str]) -> str:
    """Fold warning items into a single message"""
    return ' '.join(warnings).strip() or DEFAULT_ERROR_MESSAGE


def has_generation_prompt(document: Document, selector: str = GENERATION_PROMPT) -> bool:
    """True when the page offers to generate a key, meaning none exists yet"""
    return document.select_one(selector) is not None
