"""
Scorer configuration. A configuration is a JSON object such as

    {"scorers": {"muc": "muc", "ceaf": {"type": "mention-ceaf", "matcher": "hungarian"}}}

`Params` wraps one object level of it. Values are consumed as they are read, so whatever
is left over once an object has been built is a mistake in the configuration and is
reported as one.
"""
import copy
import json
import logging
from os import PathLike
from typing import Any, Dict, Iterator, List, Tuple, Union

from corefscore.common.checks import ConfigurationError

logger = logging.getLogger(__name__)

# distinguishes "no default given" from a default of None
_REQUIRED = object()


def merge_configs(base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
    """
    Returns a copy of `base` with `update` merged in. Nested objects are merged key by key;
    any other value in `update` replaces the one in `base`.
    """
    merged = copy.deepcopy(base)
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _nest(dotted_key: str, value: Any) -> Dict[str, Any]:
    for part in reversed(dotted_key.split(".")):
        value = {part: value}
    return value


def parse_overrides(overrides: Union[str, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Parses overrides given as a JSON object (or an already decoded dict). Keys may be
    dotted paths, so `{"scorers.blanc.use_self_edges": true}` and
    `{"scorers": {"blanc": {"use_self_edges": true}}}` mean the same thing.
    """
    if not overrides:
        return {}
    if isinstance(overrides, str):
        try:
            overrides = json.loads(overrides)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"could not parse overrides {overrides!r}: {e}")
    if not isinstance(overrides, dict):
        raise ConfigurationError(f"overrides must be a JSON object, got {overrides!r}")

    parsed: Dict[str, Any] = {}
    for key, value in overrides.items():
        parsed = merge_configs(parsed, _nest(key, value))
    return parsed


class Params:
    """
    One object of a configuration, together with its `path` from the configuration root
    (e.g. `"scorers.ceaf."`), which error messages use to point at the offending key.

    Nested objects are handed out as `Params` themselves; every other value is returned as
    decoded from JSON.
    """

    def __init__(self, params: Dict[str, Any], path: str = "") -> None:
        self.params = params
        self.path = path

    def pop(self, key: str, default: Any = _REQUIRED) -> Any:
        """
        Removes `key` and returns its value. Without a `default`, a missing key is a
        `ConfigurationError`.
        """
        if key in self.params:
            value = self.params.pop(key)
            logger.info("%s%s = %s", self.path, key, value)
        elif default is _REQUIRED:
            raise ConfigurationError(f'key "{self.path}{key}" is required')
        else:
            value = default
        return self._wrap(key, value)

    def pop_choice(
        self, key: str, choices: List[str], default_to_first_choice: bool = False
    ) -> Any:
        """
        Pops `key`, which must name one of `choices`. A dotted value such as
        `"my_module.scorers.MyScorer"` is let through as a class path to import.
        """
        default = choices[0] if default_to_first_choice and choices else _REQUIRED
        value = self.pop(key, default)
        if value in choices or (isinstance(value, str) and "." in value):
            return value
        raise ConfigurationError(
            f"{value} not in acceptable choices for {self.path}{key}: {choices}. "
            "Load the module registering it with --include-package, or give a fully "
            'qualified class name such as {"type": "my_module.scorers.MyScorer"}.'
        )

    def assert_empty(self, owner: str) -> None:
        if self.params:
            raise ConfigurationError(f"Extra parameters passed to {owner}: {self.params}")

    def items(self) -> Iterator[Tuple[str, Any]]:
        for key, value in self.params.items():
            yield key, self._wrap(key, value)

    def as_dict(self) -> Dict[str, Any]:
        return self.params

    def __contains__(self, key: str) -> bool:
        return key in self.params

    def __getitem__(self, key: str) -> Any:
        if key not in self.params:
            raise KeyError(key)
        return self._wrap(key, self.params[key])

    def _wrap(self, key: str, value: Any) -> Any:
        if isinstance(value, dict):
            return Params(value, path=f"{self.path}{key}.")
        return value

    @classmethod
    def from_file(
        cls, config_file: Union[str, PathLike], overrides: Union[str, Dict[str, Any]] = ""
    ) -> "Params":
        """
        Reads a JSON configuration file and applies `overrides` (see `parse_overrides`)
        on top of it.
        """
        try:
            with open(config_file, "r") as input_file:
                config = json.load(input_file)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"could not parse config file {config_file}: {e}")
        if not isinstance(config, dict):
            raise ConfigurationError(f"config file {config_file} must hold a JSON object")
        return cls(merge_configs(config, parse_overrides(overrides)))

    def __repr__(self) -> str:
        return f"Params({self.path!r}, {self.params})"
