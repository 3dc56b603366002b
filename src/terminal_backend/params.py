"""Request parameter parsing.

POS clients send parameters form-encoded, in the query string, or as JSON.
Form keys may use bracket notation, e.g. ``payment_method_types[]=card_present``
or ``payment_method_options[card_present][request_extended_authorization]=true``,
which is expanded into lists and nested dicts.
"""

import re
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from fastapi import Request

logger = logging.getLogger(__name__)

_BRACKET = re.compile(r"\[([^\]]*)\]")

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def split_key(key: str) -> List[str]:
    """Split ``a[b][]`` into ``["a", "b", ""]``."""
    head, bracket, rest = key.partition("[")
    if not bracket or not head:
        return [key]
    return [head] + _BRACKET.findall(bracket + rest)


def nest_params(items: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
    """Build a nested parameter dict from flat (key, value) pairs.

    Later scalar values for the same key win. Keys ending in ``[]`` collect
    their values into a list.
    """
    params: Dict[str, Any] = {}
    for key, value in items:
        parts = split_key(key)
        target = params
        for index, part in enumerate(parts[:-1]):
            if parts[index + 1] == "":
                if not isinstance(target.get(part), list):
                    target[part] = []
                target[part].append(value)
                break
            if not isinstance(target.get(part), dict):
                target[part] = {}
            target = target[part]
        else:
            target[parts[-1]] = value
    return params


async def request_params(request: Request) -> Dict[str, Any]:
    """Merge query string, form body and JSON body parameters."""
    items: List[Tuple[str, Any]] = list(request.query_params.multi_items())
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        items.extend(form.multi_items())

    params = nest_params(items)

    if content_type.startswith("application/json"):
        body = await request.body()
        if body:
            try:
                payload = await request.json()
            except ValueError:
                logger.warning("Ignoring malformed JSON body")
                payload = None
            if isinstance(payload, dict):
                params.update(payload)
    return params


def as_list(value: Any) -> Optional[List[str]]:
    """Accept a single value or a list of values."""
    if value is None or value == "":
        return None
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def as_amount(value: Any) -> Any:
    """Convert digit strings to int, leave anything else for Stripe to judge."""
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value
