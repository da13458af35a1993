#!/usr/bin/env python3

"""
Layered Configuration

Settings files are read into one flat key space. Nested keys are joined with
``:`` (``Logging:LogLevel:Default``), lookups are case-insensitive and later
sources override earlier ones. Sections are bound onto pydantic models, with
prefixed environment variables (``SCOPEGRAFT_Logging__LogLevel__Default``)
layered over the file values by pydantic-settings at bind time.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, Field, ValidationError, create_model
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from ..container.errors import ConfigurationError
from ..functional.result_monad import Result, from_callable

logger = logging.getLogger(__name__)

M = TypeVar('M', bound=BaseModel)

KEY_DELIMITER = ":"
ENV_SECTION_DELIMITER = "__"


def flatten(data: Any, prefix: str = "") -> Dict[str, Any]:
    """Flattens nested mappings and lists into ``a:b:0`` style keys"""
    items: Dict[str, Any] = {}
    if isinstance(data, Mapping):
        children = ((str(k), v) for k, v in data.items())
    elif isinstance(data, list):
        children = ((str(i), v) for i, v in enumerate(data))
    else:
        items[prefix] = data
        return items

    for key, value in children:
        path = f"{prefix}{KEY_DELIMITER}{key}" if prefix else key
        items.update(flatten(value, path))
    return items


def load_json_settings(path: Path) -> Result[Dict[str, Any], Exception]:
    """Read one JSON settings file; missing files and bad JSON become Failures"""
    def read() -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            content = json.load(f)
        if not isinstance(content, dict):
            raise ConfigurationError(f"Settings file {path} must contain a JSON object")
        return flatten(content)

    return from_callable(read)


def match_fields(model: Type[BaseModel], values: Mapping[str, Any]) -> Dict[str, Any]:
    """Renames keys to the model's field aliases ignoring case

    When two keys land on the same field the later one wins; two mappings are
    merged key by key.
    """
    targets: Dict[str, str] = {}
    for name, field in model.model_fields.items():
        target = field.alias or name
        targets[name.casefold()] = target
        targets[target.casefold()] = target

    matched: Dict[str, Any] = {}
    for key, value in values.items():
        target = targets.get(key.casefold(), key)
        previous = matched.get(target)
        if isinstance(previous, dict) and isinstance(value, dict):
            value = {**previous, **value}
        matched[target] = value
    return matched


class EnvironmentSettings(BaseSettings):
    """Base of the settings classes that read one section from the environment

    The section's file values arrive as init arguments; environment variables
    take precedence over them.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter=ENV_SECTION_DELIMITER,
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(cls, settings_cls, init_settings, env_settings,
                                   dotenv_settings, file_secret_settings):
        return env_settings, init_settings


@dataclass(frozen=True)
class JsonFileSource:
    path: Path
    optional: bool = False

    def load(self) -> Dict[str, Any]:
        result = load_json_settings(self.path)
        if result.is_success():
            logger.debug(f"Loaded settings from {self.path}")
            return result.get_value()

        error = result.get_error()
        if isinstance(error, FileNotFoundError):
            if self.optional:
                logger.debug(f"Optional settings file not found: {self.path}")
                return {}
            raise ConfigurationError(f"Required settings file not found: {self.path}") from error
        if isinstance(error, ConfigurationError):
            raise error
        raise ConfigurationError(f"Could not read settings file {self.path}: {error}") from error


@dataclass(frozen=True)
class InMemorySource:
    data: Mapping[str, Any]

    def load(self) -> Dict[str, Any]:
        return flatten(dict(self.data))


class ConfigurationBuilder:
    """Ordered list of configuration sources"""

    def __init__(self):
        self._base_path = Path.cwd()
        self._sources: List[Any] = []
        self._environment_prefix: Optional[str] = None

    def set_base_path(self, base_path: Union[str, Path]) -> 'ConfigurationBuilder':
        self._base_path = Path(base_path)
        return self

    def add_json_file(self, path: Union[str, Path], optional: bool = False) -> 'ConfigurationBuilder':
        path = Path(path)
        if not path.is_absolute():
            path = self._base_path / path
        self._sources.append(JsonFileSource(path, optional))
        return self

    def add_environment_variables(self, prefix: str = "") -> 'ConfigurationBuilder':
        """Layer ``<prefix><Section>__<Key>`` variables over every bound section"""
        self._environment_prefix = prefix
        return self

    def add_in_memory_collection(self, data: Mapping[str, Any]) -> 'ConfigurationBuilder':
        self._sources.append(InMemorySource(data))
        return self

    def build(self) -> 'ConfigurationRoot':
        entries: Dict[str, Tuple[str, Any]] = {}
        for source in self._sources:
            for key, value in source.load().items():
                # First source to define a key decides its casing
                original = entries.get(key.casefold(), (key, None))[0]
                entries[key.casefold()] = (original, value)
        logger.info(f"Configuration built from {len(self._sources)} sources ({len(entries)} keys)")
        return ConfigurationRoot(entries, self._environment_prefix)


class ConfigurationSection:
    """A view of the keys below one path of a ``ConfigurationRoot``"""

    def __init__(self,
                 entries: Dict[str, Tuple[str, Any]],
                 path: str,
                 environment_prefix: Optional[str] = None):
        self._entries = entries
        self._environment_prefix = environment_prefix
        self.path = path

    @property
    def key(self) -> str:
        return self.path.rsplit(KEY_DELIMITER, 1)[-1]

    @property
    def value(self) -> Any:
        entry = self._entries.get(self.path.casefold())
        return entry[1] if entry else None

    def _full_key(self, key: str) -> str:
        return f"{self.path}{KEY_DELIMITER}{key}" if self.path else key

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(self._full_key(key).casefold())
        return entry[1] if entry else default

    def __getitem__(self, key: str) -> Any:
        entry = self._entries.get(self._full_key(key).casefold())
        if entry is None:
            raise KeyError(key)
        return entry[1]

    def __contains__(self, key: str) -> bool:
        return self._full_key(key).casefold() in self._entries

    def get_section(self, key: str) -> 'ConfigurationSection':
        return ConfigurationSection(self._entries, self._full_key(key), self._environment_prefix)

    def exists(self) -> bool:
        prefix = self.path.casefold()
        return any(k == prefix or k.startswith(prefix + KEY_DELIMITER) for k in self._entries)

    def to_dict(self) -> Dict[str, Any]:
        """Nested dictionary of everything below this section, original key casing"""
        prefix = f"{self.path.casefold()}{KEY_DELIMITER}" if self.path else ""
        depth = len(self.path.split(KEY_DELIMITER)) if self.path else 0
        tree: Dict[str, Any] = {}
        for folded, (original, value) in self._entries.items():
            if not folded.startswith(prefix):
                continue
            parts = original.split(KEY_DELIMITER)[depth:]
            node = tree
            for part in parts[:-1]:
                child = node.get(part)
                if not isinstance(child, dict):
                    child = {}
                    node[part] = child
                node = child
            node[parts[-1]] = value
        return tree

    def _with_environment(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Layer environment variables for this section over ``values``"""
        field = self.key.casefold()
        if not field.isidentifier():
            logger.debug(f"Section '{self.path}' cannot be read from environment variables")
            return values

        parents = self.path.split(KEY_DELIMITER)[:-1]
        env_prefix = self._environment_prefix + "".join(p + ENV_SECTION_DELIMITER for p in parents)
        settings_type = create_model(
            f"{field.title()}EnvironmentSettings",
            __base__=EnvironmentSettings,
            **{field: (Dict[str, Any], Field(default_factory=dict))},
        )
        settings = settings_type(_env_prefix=env_prefix, **{field: values})
        return getattr(settings, field)

    def bind(self, model: Type[M]) -> M:
        """Validate this section into a pydantic model"""
        values = self.to_dict()
        try:
            if self._environment_prefix is not None and self.path:
                values = self._with_environment(values)
            return model.model_validate(match_fields(model, values))
        except (ValidationError, SettingsError) as e:
            raise ConfigurationError(f"Invalid configuration section '{self.path}': {e}") from e

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_dict())

    def __repr__(self) -> str:
        return f"<ConfigurationSection path={self.path!r}>"


class ConfigurationRoot(ConfigurationSection):
    """Root of the merged configuration"""

    def __init__(self, entries: Dict[str, Tuple[str, Any]], environment_prefix: Optional[str] = None):
        super().__init__(entries, "", environment_prefix)

    @property
    def environment_prefix(self) -> Optional[str]:
        return self._environment_prefix

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"<ConfigurationRoot keys={len(self._entries)}>"
