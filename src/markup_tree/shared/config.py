"""Configuration classes for the markup tree codec.

This module holds the reserved-key convention shared by the parser and the
serializer, plus the knobs each direction exposes. All objects validate
themselves on construction.
"""

import json
import re
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

# Tag and attribute names are restricted to this character class.
NAME_PATTERN = r"[A-Za-z0-9:_-]+"

DEFAULT_ATTRIBUTE_PREFIX = "@"
DEFAULT_TEXT_KEY = "#text"
DEFAULT_COMMENT_KEY = "#comment"
DEFAULT_SYNTHETIC_ROOT_TAG = "_root"
DEFAULT_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

_NAME_RE = re.compile(f"^{NAME_PATTERN}$")
_NAME_CHAR_RE = re.compile(r"[A-Za-z0-9:_-]")
_DECLARATION_RE = re.compile(r"^<\?.*\?>$", re.DOTALL)

_COMPONENT_FIELDS = ("convention", "parser", "serializer")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


def _is_name_safe(key: str) -> bool:
    """True if ``key`` contains a character no tag name can contain."""
    return any(not _NAME_CHAR_RE.match(char) for char in key)


@dataclass(frozen=True)
class TreeConvention:
    """Reserved keys of the mapping-based tree representation.

    Attributes are stored under ``attribute_prefix + name``; text runs and
    comments use ``text_key`` and ``comment_key``. Every other key is a tag
    name, so each reserved key must contain a character that a tag name
    cannot.
    """

    attribute_prefix: str = DEFAULT_ATTRIBUTE_PREFIX
    text_key: str = DEFAULT_TEXT_KEY
    comment_key: str = DEFAULT_COMMENT_KEY

    def __post_init__(self) -> None:
        """Validate the reserved keys."""
        for name in ("attribute_prefix", "text_key", "comment_key"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"{name} must be a non-empty string")
            if not _is_name_safe(value):
                raise ValueError(f"{name} {value!r} could be mistaken for a tag name")

        if self.text_key == self.comment_key:
            raise ValueError("text_key and comment_key must differ")
        for name in ("text_key", "comment_key"):
            if getattr(self, name).startswith(self.attribute_prefix):
                raise ValueError(
                    f"{name} must not start with the attribute prefix "
                    f"{self.attribute_prefix!r}"
                )

    def is_attribute(self, key: str) -> bool:
        """Check whether ``key`` names an attribute."""
        return key.startswith(self.attribute_prefix)

    def attribute_key(self, name: str) -> str:
        """Build the mapping key for attribute ``name``."""
        return self.attribute_prefix + name

    def attribute_name(self, key: str) -> str:
        """Strip the attribute prefix from ``key``."""
        return key[len(self.attribute_prefix):]

    def is_reserved(self, key: str) -> bool:
        """Check whether ``key`` is an attribute, text, or comment key."""
        return (
            self.is_attribute(key)
            or key == self.text_key
            or key == self.comment_key
        )


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for markup to tree conversion."""

    synthetic_root_tag: str = DEFAULT_SYNTHETIC_ROOT_TAG
    strip_declaration: bool = True

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        if not _NAME_RE.match(self.synthetic_root_tag or ""):
            raise ValueError(
                "synthetic_root_tag must be a valid tag name"
            )


@dataclass(frozen=True)
class SerializerConfig:
    """Configuration for tree to markup conversion."""

    declaration: str = DEFAULT_DECLARATION
    include_declaration: bool = True
    pretty_print: bool = True
    strict: bool = True  # Raise TreeShapeError instead of skipping bad entries

    def __post_init__(self) -> None:
        """Validate serializer configuration."""
        if not _DECLARATION_RE.match(self.declaration or ""):
            raise ValueError("declaration must have the form '<?...?>'")


@dataclass(frozen=True)
class CodecConfig:
    """Complete configuration for both conversion directions.

    Immutable, so one instance can be shared between parsers, serializers,
    and threads. Use ``override`` to derive a modified copy.
    """

    convention: TreeConvention = field(default_factory=TreeConvention)
    parser: ParserConfig = field(default_factory=ParserConfig)
    serializer: SerializerConfig = field(default_factory=SerializerConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete codec configuration."""
        try:
            self.convention.__post_init__()
            self.parser.__post_init__()
            self.serializer.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if self.convention.is_reserved(self.parser.synthetic_root_tag):
            raise ConfigValidationError(
                "synthetic_root_tag collides with a reserved key",
                field_name="parser.synthetic_root_tag",
                suggestions=["Use a tag name without the attribute prefix"],
            )

    def override(self, **kwargs: Any) -> "CodecConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override; nested fields use double underscore
                notation such as ``serializer__pretty_print=False``

        Returns:
            New CodecConfig instance with overrides applied

        Example:
            >>> config = CodecConfig().override(
            ...     serializer__strict=False,
            ...     convention__attribute_prefix="$",
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENT_FIELDS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in _COMPONENT_FIELDS and isinstance(value, dict):
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    item.name: _dataclass_to_dict(getattr(obj, item.name))
                    for item in fields(obj)
                }
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CodecConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files do not
        go unnoticed.
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be an object")

        def _dict_to_dataclass(data_dict: Dict[str, Any], target_class: type) -> Any:
            known = {item.name: item for item in fields(target_class)}
            unknown = sorted(set(data_dict) - set(known))
            if unknown:
                raise ConfigValidationError(
                    f"Unknown {target_class.__name__} fields: {', '.join(unknown)}",
                    field_name=unknown[0],
                )

            field_values: Dict[str, Any] = {}
            for field_name, value in data_dict.items():
                field_type = known[field_name].type
                if hasattr(field_type, "__dataclass_fields__"):
                    if not isinstance(value, dict):
                        raise ConfigValidationError(
                            f"{field_name} must be an object", field_name=field_name
                        )
                    field_values[field_name] = _dict_to_dataclass(value, field_type)
                else:
                    field_values[field_name] = value

            try:
                return target_class(**field_values)
            except ValueError as e:
                raise ConfigValidationError(str(e)) from e

        return _dict_to_dataclass(data, cls)

    @classmethod
    def from_json(cls, json_str: str) -> "CodecConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "CodecConfig":
        """Create the default configuration."""
        return cls(name="default")

    @classmethod
    def compact(cls) -> "CodecConfig":
        """Create a preset that emits bare markup without layout changes."""
        return cls(
            serializer=SerializerConfig(include_declaration=False, pretty_print=False),
            name="compact",
            description="Serialize without declaration or one-tag-per-line layout",
        )

    @classmethod
    def lenient(cls) -> "CodecConfig":
        """Create a preset whose serializer skips malformed tree entries."""
        return cls(
            serializer=SerializerConfig(strict=False),
            name="lenient",
            description="Skip malformed tree entries instead of raising",
        )
