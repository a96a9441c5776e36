"""Parsing of free-text model output into canonical receipt records.

Model output is trusted syntactically, never semantically: the sanitizer
locates the outermost ``{...}`` span, parses it permissively and coerces each
known field into its canonical type. Anything it cannot make sense of falls
back to the field's empty default instead of raising, so callers always get a
structurally complete record.
"""

import json
import logging
import math
import re
from typing import Any

from pricescout.receipt.base import (
    Flavor,
    MultiItemReceipt,
    Number,
    ReceiptLineItem,
    SanitizedReceipt,
    SingleItemReceipt,
)

logger = logging.getLogger("pricescout")

_CODE_FENCE = re.compile(r"```json|```")
_NON_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_DECIMAL = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def extract_json_span(text: str) -> str | None:
    """Slice from the first ``{`` to the last ``}`` and drop markdown fences."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    return _CODE_FENCE.sub("", text[start:end + 1]).strip()


def coerce_number(value: Any) -> Number | None:
    """Coerce a model-provided value into a finite number, or None if impossible.

    ``"¥1,200"`` becomes ``1200``; numbers pass through untouched.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    match = _LEADING_DECIMAL.match(_NON_NUMERIC.sub("", value))
    if not match:
        return None
    number = float(match.group(0))
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _number_or_empty(value: Any) -> Number | str:
    number = coerce_number(value)
    return "" if number is None else number


def _line_items(value: Any) -> list[ReceiptLineItem]:
    if not isinstance(value, list):
        return []

    items = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        name = _text(entry.get("name"))
        price = coerce_number(entry.get("price"))
        if not name or price is None or price < 0:
            continue
        items.append(ReceiptLineItem(name=name, price=price))
    return items


def candidate_text(document: Any) -> str | None:
    """Return the first candidate's first text part of a generateContent response."""
    try:
        text = document["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


class ResponseSanitizer:
    def __init__(self, flavor: Flavor) -> None:
        self.flavor = flavor

    def empty(self) -> SingleItemReceipt | MultiItemReceipt:
        if self.flavor is Flavor.IMAGE:
            return MultiItemReceipt()
        return SingleItemReceipt()

    def project(self, parsed: dict) -> SingleItemReceipt | MultiItemReceipt:
        """Map a parsed JSON object onto the canonical record; unknown keys are ignored."""
        if self.flavor is Flavor.IMAGE:
            return MultiItemReceipt(
                store=_text(parsed.get("store")),
                items=_line_items(parsed.get("items")),
            )

        total = parsed.get("total")
        if total is None:
            total = parsed.get("price")
        return SingleItemReceipt(
            name=_text(parsed.get("name")),
            store=_text(parsed.get("store")),
            total=_number_or_empty(total),
            date=_text(parsed.get("date")),
            quantity=_number_or_empty(parsed.get("quantity")),
            unit=_text(parsed.get("unit")),
            memo=_text(parsed.get("memo")),
        )

    def sanitize(self, text: str | None) -> SanitizedReceipt:
        if not isinstance(text, str):
            logger.warning("Model output has no text", extra={"extra_data": {"flavor": self.flavor.value}})
            return SanitizedReceipt(receipt=self.empty(), status="defaulted")

        span = extract_json_span(text)
        if span is None:
            logger.warning("No JSON found in model output", extra={"extra_data": {"flavor": self.flavor.value}})
            return SanitizedReceipt(receipt=self.empty(), status="defaulted")

        try:
            parsed = json.loads(span)
        except (ValueError, RecursionError) as e:
            logger.warning(
                f"Failed to parse model output: {e}",
                extra={"extra_data": {"flavor": self.flavor.value}},
            )
            return SanitizedReceipt(receipt=self.empty(), status="defaulted")

        if not isinstance(parsed, dict):
            return SanitizedReceipt(receipt=self.empty(), status="defaulted")

        return SanitizedReceipt(receipt=self.project(parsed), status="parsed")
