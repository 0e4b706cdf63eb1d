"""${ENV_VAR} and ${ENV_VAR:-default} interpolation for raw config data."""

import os
import re
from collections.abc import Callable

# Group 1 is the variable name, group 2 the optional fallback after ":-".
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

type RawValue = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


def collect_missing_vars(data: RawValue) -> list[str]:
    """Return every referenced env var that is unset and has no fallback.

    Names are returned once each, in order of first reference, so the caller
    can report all of them in a single error.
    """
    missing: list[str] = []

    def visit(text: str) -> str:
        for match in _ENV_VAR_PATTERN.finditer(text):
            name, fallback = match.group(1), match.group(2)
            if fallback is None and name not in os.environ and name not in missing:
                missing.append(name)
        return text

    _map_strings(data, visit)
    return missing


def interpolate(data: RawValue) -> RawValue:
    """Substitute env var references throughout ``data``.

    An unset variable with a ``:-`` fallback takes the fallback text. Call
    `collect_missing_vars` first; an unset variable without a fallback raises
    KeyError here.
    """
    return _map_strings(data, lambda text: _ENV_VAR_PATTERN.sub(_resolve, text))


def _resolve(match: re.Match[str]) -> str:
    name, fallback = match.group(1), match.group(2)
    if name in os.environ or fallback is None:
        return os.environ[name]
    return fallback


def _map_strings(data: RawValue, fn: Callable[[str], str]) -> RawValue:
    if isinstance(data, str):
        return fn(data)
    if isinstance(data, list):
        return [_map_strings(item, fn) for item in data]
    if isinstance(data, dict):
        return {key: _map_strings(value, fn) for key, value in data.items()}
    return data
