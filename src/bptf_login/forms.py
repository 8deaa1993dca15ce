#!/usr/bin/env python3
"""
Form Extraction

Reads field values out of server-rendered forms. Form controls are
serialized the way a browser submits them, so a snapshot taken here can
be posted straight back to the site.
"""

import re
from typing import Optional, Dict, List, Tuple, Iterable, Union

from bs4 import BeautifulSoup, Tag

IDENTITY_FIELD = 'user-id'

# Controls a browser never submits
_SUBMITTER_TYPES = {'submit', 'button', 'image', 'reset', 'file'}
_CHECKABLE_TYPES = {'checkbox', 'radio'}
_CRLF = re.compile(r'\r?\n')

Document = Union[BeautifulSoup, Tag]


def parse_document(markup: Union[str, bytes]) -> BeautifulSoup:
    """Parse a response body into a queryable document"""
    return BeautifulSoup(markup, 'html.parser')


def _option_value(option: Tag) -> str:
    value = option.get('value')
    if value is not None:
        return value
    return ' '.join(option.get_text().split())


def _selected_options(select: Tag) -> List[Tag]:
    options = [
        option for option in select.find_all('option')
        if not option.has_attr('disabled')
        and not (option.parent.name == 'optgroup' and option.parent.has_attr('disabled'))
    ]
    selected = [option for option in options if option.has_attr('selected')]

    if select.has_attr('multiple'):
        return selected
    if selected:
        # Browsers keep the last "selected" option of a single select
        return selected[-1:]
    return options[:1]


def _control_value(element: Tag) -> Optional[str]:
    """Current value of a single form control, as a browser reports it"""
    if element.name == 'textarea':
        return element.get_text()
    if element.name == 'select':
        options = _selected_options(element)
        return _option_value(options[0]) if options else None

    value = element.get('value')
    if value is None:
        return 'on' if element.get('type', '').lower() in _CHECKABLE_TYPES else ''
    return value


def serialize_form(form: Tag) -> List[Tuple[str, str]]:
    """
    Serialize a form's successful controls into (name, value) pairs

    Follows the browser rules for what gets submitted: named, enabled
    controls only; no buttons or file inputs; checkboxes and radios only
    when checked; every selected option of a multi-select.

    Args:
        form: The <form> element

    Returns:
        List of (name, value) pairs in document order
    """
    pairs: List[Tuple[str, str]] = []

    for element in form.find_all(['input', 'select', 'textarea']):
        name = element.get('name')
        if not name or element.has_attr('disabled'):
            continue

        input_type = element.get('type', '').lower() if element.name == 'input' else ''
        if input_type in _SUBMITTER_TYPES:
            continue
        if input_type in _CHECKABLE_TYPES and not element.has_attr('checked'):
            continue

        if element.name == 'select' and element.has_attr('multiple'):
            values = [_option_value(option) for option in _selected_options(element)]
        else:
            value = _control_value(element)
            if value is None:
                continue
            values = [value]

        for value in values:
            pairs.append((name, _CRLF.sub('\r\n', value)))

    return pairs


def extract_field_value(document: Document, selector: str, scope: Optional[str] = None) -> Optional[str]:
    """
    Resolve a single element by selector and return its value

    Args:
        document: Parsed page
        selector: CSS selector of the field
        scope: Optional CSS selector of a container the field must sit in

    Returns:
        The field's value, or None if the element (or its scope) is absent
    """
    if scope is not None:
        document = document.select_one(scope)
        if document is None:
            return None

    element = document.select_one(selector)
    if element is None:
        return None
    if element.name == 'input':
        return element.get('value')
    return _control_value(element)


def extract_form_values(document: Document, form_selector: str,
                        exclude_names: Iterable[str] = ()) -> Dict[str, str]:
    """
    Snapshot a form as a name -> value mapping

    The identity field is always dropped: it is sent as a request
    parameter of its own, never as a stored setting.

    Args:
        document: Parsed page
        form_selector: CSS selector of the form
        exclude_names: Further field names to drop

    Returns:
        Mapping of field name to value; empty if the form is absent
    """
    form = document.select_one(form_selector)
    if form is None:
        return {}

    excluded = set(exclude_names) | {IDENTITY_FIELD}
    return {name: value for name, value in serialize_form(form) if name not in excluded}
