"""
Type-mapping configuration.

Holds the source-to-target type spelling table and the generation
options. Defaults live in code; a YAML or JSON document and CLI flags
are merged on top before the configuration is frozen for the run.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml

from ..logging_config import get_logger
from ..utils import SourceLoadError, load_bytes, location_suffix
from .model import RECOGNIZED_TAG_KEYS

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class ConfigFormatError(ConfigError):
    """Raised when a configuration document cannot be parsed or has the wrong shape."""

    pass


# Go -> TypeScript spellings
DEFAULT_TYPE_MAPPINGS: Dict[str, str] = {
    # Basic types
    "string": "string",
    "bool": "boolean",
    "int": "number",
    "int8": "number",
    "int16": "number",
    "int32": "number",
    "int64": "number",
    "uint": "number",
    "uint8": "number",
    "uint16": "number",
    "uint32": "number",
    "uint64": "number",
    "float32": "number",
    "float64": "number",
    "complex64": "number",
    "complex128": "number",
    "byte": "number",
    "rune": "number",
    "uintptr": "number",
    # Special types
    "[]byte": "string",  # base64
    "time.Time": "string",  # ISO 8601
    "time.Duration": "number",  # nanoseconds
    "interface{}": "unknown",
    "any": "unknown",
    "error": "string",
    # UUID types
    "uuid.UUID": "string",
    "github.com/google/uuid.UUID": "string",
    "github.com/gofrs/uuid.UUID": "string",
    "github.com/satori/go.uuid.UUID": "string",
    # Decimal types
    "decimal.Decimal": "string",
    "github.com/shopspring/decimal.Decimal": "string",
    # JSON types
    "json.RawMessage": "unknown",
}

_YAML_HINTS = {"yaml", "yml"}
_JSON_HINTS = {"json"}


@dataclass
class Options:
    """Generation options."""

    per_type: bool = False
    exported_only: bool = True
    tag_key: str = "json"
    include_types: Sequence[str] = field(default_factory=list)
    exclude_types: Sequence[str] = field(default_factory=list)
    _frozen: bool = field(default=False, init=False, repr=False, compare=False)

    def __setattr__(self, name: str, value: Any):
        if getattr(self, "_frozen", False):
            raise ConfigError(f"Options are frozen, cannot set {name}")
        super().__setattr__(name, value)

    def freeze(self):
        """Make the options read-only; name lists become tuples."""
        self.include_types = tuple(self.include_types)
        self.exclude_types = tuple(self.exclude_types)
        super().__setattr__("_frozen", True)


@dataclass
class Configuration:
    """Type mappings plus options for one generation run."""

    type_mappings: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_TYPE_MAPPINGS)
    )
    options: Options = field(default_factory=Options)
    _frozen: bool = field(default=False, init=False, repr=False, compare=False)

    # Lookup

    def map_type(self, spelling: str) -> str:
        """
        Map a source type spelling to its target spelling.

        Returns the input unchanged when no entry exists, so callers
        compare the result with the input to detect a miss.
        """
        return self.type_mappings.get(spelling, spelling)

    def should_include(self, name: str, is_exported: bool) -> bool:
        """Check if a declaration passes the exported, include and exclude filters."""
        if self.options.exported_only and not is_exported:
            return False

        if self.options.include_types and name not in self.options.include_types:
            return False

        return name not in self.options.exclude_types

    # Mutation

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "Configuration":
        """
        Refuse any further changes for the rest of the run.

        The mapping table becomes a read-only view and the options
        reject attribute assignment.
        """
        if self._frozen:
            return self
        self.type_mappings = MappingProxyType(dict(self.type_mappings))
        self.options.freeze()
        self._frozen = True
        return self

    def __setattr__(self, name: str, value: Any):
        if getattr(self, "_frozen", False):
            raise ConfigError("Configuration is frozen and cannot be modified")
        super().__setattr__(name, value)

    def _check_mutable(self):
        if self._frozen:
            raise ConfigError("Configuration is frozen and cannot be modified")

    def set_type_mapping(self, source: str, target: str):
        """Add or replace a single type mapping."""
        self._check_mutable()
        self.type_mappings[source] = target

    def load_file(self, path: Union[str, Path]):
        """
        Load a YAML or JSON document from a file or URL and merge it.

        The file suffix selects the format; other suffixes try YAML,
        then JSON.

        Raises:
            ConfigError: If the file cannot be read
            ConfigFormatError: If the content cannot be parsed
        """
        try:
            data = load_bytes(path)
        except SourceLoadError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        logger.debug(f"Loaded configuration from {path}")
        self.load_overrides(data, location_suffix(path), source=str(path))

    def load_overrides(
        self,
        data: Union[bytes, str],
        format_hint: Optional[str] = None,
        source: str = "<config>",
    ):
        """
        Merge an override document onto this configuration.

        Args:
            data: Document content
            format_hint: "yaml", "yml", "json" (leading dot allowed) or None
            source: Name used in error messages

        Raises:
            ConfigFormatError: If no format yields a mapping
        """
        self._check_mutable()
        document = self._parse_document(data, format_hint, source)
        self._merge(document, source)

    def apply_options(
        self,
        per_type: Optional[bool] = None,
        exported_only: Optional[bool] = None,
        tag_key: Optional[str] = None,
        include_types: Optional[List[str]] = None,
        exclude_types: Optional[List[str]] = None,
    ):
        """Apply command-line overrides; None and empty values leave options untouched."""
        self._check_mutable()
        if per_type:
            self.options.per_type = True
        if exported_only is not None:
            self.options.exported_only = exported_only
        if tag_key:
            self.options.tag_key = tag_key
        if include_types:
            self.options.include_types = list(include_types)
        if exclude_types:
            self.options.exclude_types = list(exclude_types)

    # Parsing

    def _parse_document(
        self, data: Union[bytes, str], format_hint: Optional[str], source: str
    ) -> Dict[str, Any]:
        if isinstance(data, bytes):
            try:
                text = data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ConfigFormatError(f"{source}: not valid UTF-8: {e}") from e
        else:
            text = data

        if not text.strip():
            return {}

        hint = (format_hint or "").lower().lstrip(".")
        if hint in _YAML_HINTS:
            formats = ["yaml"]
        elif hint in _JSON_HINTS:
            formats = ["json"]
        else:
            formats = ["yaml", "json"]

        errors = []
        for fmt in formats:
            try:
                document = yaml.safe_load(text) if fmt == "yaml" else json.loads(text)
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                errors.append(f"{fmt}: {e}")
                continue

            if document is None:
                return {}
            if not isinstance(document, dict):
                errors.append(f"{fmt}: expected a mapping, got {type(document).__name__}")
                continue
            return document

        if len(formats) > 1:
            message = f"{source}: unable to parse config as YAML or JSON"
        else:
            message = f"{source}: invalid {formats[0].upper()} config"
        logger.debug(f"Config parse failures for {source}: {errors}")
        raise ConfigFormatError(f"{message} ({errors[-1]})")

    def _merge(self, document: Dict[str, Any], source: str):
        mappings = document.get("typeMappings")
        if mappings is not None:
            if not isinstance(mappings, dict):
                raise ConfigFormatError(f"{source}: 'typeMappings' must be a mapping")
            for key, value in mappings.items():
                if not isinstance(value, str):
                    raise ConfigFormatError(
                        f"{source}: typeMappings.{key} must be a string, "
                        f"got {type(value).__name__}"
                    )
            self.type_mappings.update(
                {str(key): value for key, value in mappings.items()}
            )

        options = document.get("options")
        if options is None:
            options = {}
        if not isinstance(options, dict):
            raise ConfigFormatError(f"{source}: 'options' must be a mapping")

        tag_key = options.get("tagKey")
        if tag_key:
            self.options.tag_key = str(tag_key)

        if _bool_option(options, "perType", source):
            self.options.per_type = True

        # Replaced even when absent: a document without the key turns the filter off
        exported_only = _bool_option(options, "exportedOnly", source)
        if "exportedOnly" not in options:
            logger.warning(
                f"{source}: options.exportedOnly not set, unexported types will be included"
            )
        self.options.exported_only = exported_only

        include_types = _list_option(options, "includeTypes", source)
        if include_types:
            self.options.include_types = include_types

        exclude_types = _list_option(options, "excludeTypes", source)
        if exclude_types:
            self.options.exclude_types = exclude_types

    # Export

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the document layout accepted by load_overrides."""
        return {
            "typeMappings": dict(self.type_mappings),
            "options": {
                "perType": self.options.per_type,
                "exportedOnly": self.options.exported_only,
                "tagKey": self.options.tag_key,
                "includeTypes": list(self.options.include_types),
                "excludeTypes": list(self.options.exclude_types),
            },
        }

    def save(self, output_path: Union[str, Path]):
        """Save configuration to a YAML file (.yaml/.yml) or JSON file (anything else)."""
        path = Path(output_path)
        try:
            with open(path, "w", encoding="utf-8") as f:
                if path.suffix.lower() in (".yaml", ".yml"):
                    yaml.safe_dump(self.to_dict(), f, sort_keys=False)
                else:
                    json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        if self.options.tag_key not in RECOGNIZED_TAG_KEYS:
            warnings.append(
                f"Tag key '{self.options.tag_key}' is not extracted from struct tags"
            )

        both = set(self.options.include_types) & set(self.options.exclude_types)
        for name in sorted(both):
            warnings.append(f"Type '{name}' is both included and excluded")

        for source, target in self.type_mappings.items():
            if not target:
                warnings.append(f"Empty target type for mapping '{source}'")

        return warnings


def _bool_option(options: Dict[str, Any], key: str, source: str) -> bool:
    value = options.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigFormatError(f"{source}: options.{key} must be a boolean")
    return value


def _list_option(options: Dict[str, Any], key: str, source: str) -> List[str]:
    value = options.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigFormatError(f"{source}: options.{key} must be a list")
    return [str(item) for item in value]


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Configuration:
    """
    Convenience function to build a configuration.

    Args:
        config_file: Optional YAML/JSON file or URL to merge onto the defaults
        overrides: Keyword arguments for Configuration.apply_options

    Returns:
        Merged, still mutable configuration
    """
    config = Configuration()
    if config_file:
        config.load_file(config_file)
    if overrides:
        config.apply_options(**overrides)
    return config
