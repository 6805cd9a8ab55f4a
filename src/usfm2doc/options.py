"""Build validated formatting configurations from raw user selections."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from usfm2doc.exceptions import UnsupportedOptionError
from usfm2doc.schemas import FormatConfiguration, TextAlignment, TextDirection

logger = logging.getLogger(__name__)

# Toggle shapes used by the desktop option panel.
_LEGACY_TOGGLES: dict[str, tuple[str, Any, Any]] = {
    "justified": ("alignment", TextAlignment.JUSTIFIED, TextAlignment.LEFT),
    "left_to_right": ("direction", TextDirection.LEFT_TO_RIGHT, TextDirection.RIGHT_TO_LEFT),
}


def build_configuration(raw_options: Mapping[str, Any] | None = None) -> FormatConfiguration:
    """Validate and normalize raw option selections.

    Unset selectors fall back to documented defaults (text size Medium,
    spacing Single, alignment Left, direction LeftToRight, one column).

    Args:
        raw_options: Option name to selected value. ``justified`` and
            ``left_to_right`` booleans are accepted in place of ``alignment``
            and ``direction``.

    Returns:
        An immutable configuration that the layout transform can use as is.

    Raises:
        UnsupportedOptionError: If a value is outside its domain or the
            option name is unknown.
    """
    values = dict(raw_options or {})

    for toggle, (target, when_true, when_false) in _LEGACY_TOGGLES.items():
        if toggle not in values:
            continue
        flag = values.pop(toggle)
        if not isinstance(flag, bool):
            raise UnsupportedOptionError(toggle, flag, "expected a boolean")
        if values.get(target) is None:
            values[target] = when_true if flag else when_false

    try:
        config = FormatConfiguration(**values)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "options"
        value = values.get(field, error.get("input"))
        raise UnsupportedOptionError(field, value, error["msg"]) from exc

    logger.debug("Built format configuration: %s", config.model_dump(mode="json"))
    return config
