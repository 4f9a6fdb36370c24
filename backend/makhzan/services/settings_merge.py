"""
Settings resolution on load.

A persisted settings blob may come from an older (or newer) release and be
missing keys, or carry values the current schema rejects. ``deep_merge`` fills
every absent key from the defaults at every nesting level; ``resolve_settings``
then validates the result and falls back to the default for any leaf that does
not fit the schema, so loading never fails because of the settings blob.
"""
import copy
import logging
from typing import Any
from pydantic import ValidationError

from makhzan.schemas.settings import StoreSettings, default_settings

logger = logging.getLogger(__name__)


def deep_merge(defaults: dict, persisted: dict) -> dict:
    """
    Overlay persisted values on defaults, recursively.

    - keys absent from persisted take the default value
    - keys present in persisted keep the persisted value
    - where the default is a mapping, a persisted mapping is merged into it and
      a persisted non-mapping is ignored
    - keys only present in persisted are kept

    Neither argument is modified.
    """
    result = copy.deepcopy(defaults)
    for key, value in persisted.items():
        default = defaults.get(key)
        if isinstance(default, dict):
            if isinstance(value, dict):
                result[key] = deep_merge(default, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _restore_default(candidate: dict, defaults: dict, loc: tuple) -> None:
    target: Any = candidate
    source: Any = defaults
    for part in loc[:-1]:
        if not isinstance(target, dict) or part not in target:
            return
        target = target[part]
        source = source.get(part, {}) if isinstance(source, dict) else {}
    if not isinstance(target, dict):
        return
    key = loc[-1]
    if isinstance(source, dict) and key in source:
        target[key] = copy.deepcopy(source[key])
    else:
        target.pop(key, None)


def resolve_settings(persisted: Any) -> StoreSettings:
    """Build a valid StoreSettings from a persisted blob (or None)."""
    if not isinstance(persisted, dict):
        return StoreSettings()

    defaults = default_settings()
    candidate = deep_merge(defaults, persisted)
    try:
        return StoreSettings.model_validate(candidate)
    except ValidationError as exc:
        for error in exc.errors():
            loc = tuple(error["loc"])
            if not loc:
                continue
            logger.warning(
                f"Dropping persisted setting {'.'.join(str(p) for p in loc)}: {error['msg']}"
            )
            _restore_default(candidate, defaults, loc)

    try:
        return StoreSettings.model_validate(candidate)
    except ValidationError as exc:
        logger.warning(f"Persisted settings unusable, using defaults: {exc}")
        return StoreSettings()
