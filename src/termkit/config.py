"""Tool configuration files.

A configuration file is a YAML mapping. Top-level scalar keys are shared by
every command; a mapping under a command's section name (`resolve`, `build`,
`import`, `hrg`, or the legacy tool names `trrt`, `mrgt`, `mrg-import`,
`hrgt`) overrides them for that command. Explicit command-line values always
win over the file.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from termkit.glossary.exceptions import ConfigError

SECTION_ALIASES: Dict[str, tuple[str, ...]] = {
    "resolve": ("trrt", "resolve"),
    "build": ("mrgt", "build"),
    "import": ("mrg-import", "import"),
    "hrg": ("hrgt", "hrg"),
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def normalize_key(key: str) -> str:
    """Map camelCase and kebab-case option names to snake_case.

    Examples:
        >>> normalize_key("onNotExist")
        'on_not_exist'
        >>> normalize_key("on-not-exist")
        'on_not_exist'
    """
    return _CAMEL_BOUNDARY.sub("_", str(key)).replace("-", "_").lower()


def load_config_file(path: Path, section: str) -> Dict[str, Any]:
    """
    Load the options of one command from a configuration file.

    Args:
        path: Path to the YAML configuration file
        section: Command name whose section overrides the shared options

    Returns:
        Options keyed by snake_case name

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping
    """
    yaml = YAML(typ="safe")
    try:
        with Path(path).open(encoding="utf-8") as handle:
            data = yaml.load(handle)
    except (OSError, YAMLError) as e:
        raise ConfigError(f"E011 Failed to read or parse the config file '{path}': {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"E011 Config file '{path}' must contain a mapping")

    section_names = {name for names in SECTION_ALIASES.values() for name in names}
    options: Dict[str, Any] = {
        normalize_key(key): value
        for key, value in data.items()
        if key not in section_names and not isinstance(value, dict)
    }
    for name in SECTION_ALIASES.get(section, (section,)):
        overrides = data.get(name)
        if isinstance(overrides, dict):
            options.update({normalize_key(k): v for k, v in overrides.items()})
    return options


def merge_options(cli: Mapping[str, Any], config: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Combine config-file options with command-line options; CLI values win."""
    merged: Dict[str, Any] = dict(config or {})
    for key, value in cli.items():
        if value is not None:
            merged[key] = value
    return merged


def require_options(options: Mapping[str, Any], names: Iterable[str]) -> None:
    """
    Check that required options are present after merging.

    Raises:
        ConfigError: Naming the first missing option
    """
    for name in names:
        if options.get(name) in (None, ""):
            flag = "--" + name.replace("_", "-")
            raise ConfigError(f"A required option is missing. Provide at least the following option: {flag}")
