import string
from dataclasses import MISSING, field, fields, is_dataclass
from enum import Enum
from typing import Any, Callable, Iterable, KeysView, Type, TypeVar

from zenkit.dates import DateTime
from zenkit.errors import InvalidValueError, MalformedResponseError

T = TypeVar('T')

WIRE_NAME = 'wire_name'
WIRE_PARSER = 'wire_parser'
UUID_GROUP_LENGTHS = (8, 4, 4, 4, 12)


def wire_field(wire_name: str | None = None, *, parse: Callable[[Any], Any] | None = None,
               default: Any = MISSING, default_factory: Any = MISSING) -> Any:
    """
    Dataclass field carrying its JSON key and an optional value parser.

    The parser runs on every value present in the payload, including ``None``.
    """
    metadata = {WIRE_NAME: wire_name, WIRE_PARSER: parse}
    if default_factory is not MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    if default is not MISSING:
        return field(default=default, metadata=metadata)
    return field(metadata=metadata)


def get_all_fields_of_dataclass(cls: Type[Any]) -> KeysView[str]:
    """
    Get all fields of a dataclass class.
    """
    return cls.__dataclass_fields__.keys()


def _wire_name(spec) -> str:
    return spec.metadata.get(WIRE_NAME) or spec.name


def safe_instantiate_entry(cls: Type[T], **entry_kwargs) -> T:
    """Instantiates a wire entity, writing keys the class does not know into ``new_api_kwargs``"""
    class_fields = get_all_fields_of_dataclass(cls)
    assert 'new_api_kwargs' in class_fields, f"new_api_kwargs field is not in {cls.__name__} class"

    init_kwargs: dict[str, Any] = {}
    consumed: set[str] = set()
    for spec in fields(cls):
        if spec.name == 'new_api_kwargs' or not spec.init:
            continue
        key = _wire_name(spec)
        if key not in entry_kwargs:
            if spec.default is MISSING and spec.default_factory is MISSING:
                raise MalformedResponseError(f"{cls.__name__}: missing required field '{key}'")
            continue
        consumed.add(key)
        value = entry_kwargs[key]
        parser = spec.metadata.get(WIRE_PARSER)
        if parser is not None:
            try:
                value = parser(value)
            except (ValueError, TypeError, AttributeError) as exc:
                raise MalformedResponseError(f"{cls.__name__}.{spec.name}: invalid value {value!r}") from exc
        init_kwargs[spec.name] = value

    unexpected_kwargs = {k: v for k, v in entry_kwargs.items() if k not in consumed}
    return cls(**init_kwargs, new_api_kwargs=unexpected_kwargs)


def instantiate_from_payload(cls: Type[T], payload: Any) -> T:
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"Expected a JSON object for {cls.__name__}, got {type(payload).__name__}")
    return safe_instantiate_entry(cls, **payload)


def instantiate_many(cls: Type[T], payload: Any) -> list[T]:
    if not isinstance(payload, list):
        raise MalformedResponseError(f"Expected a JSON array of {cls.__name__}, got {type(payload).__name__}")
    return [instantiate_from_payload(cls, raw) for raw in payload]


def entity_tuple(cls: Type[Any]) -> Callable[[Any], tuple]:
    """Parser for a nested array of entities; ``null`` becomes an empty tuple."""
    def parse(raw: Iterable[Any] | None) -> tuple:
        return tuple(instantiate_many(cls, list(raw or [])))
    return parse


def optional_entity(cls: Type[Any]) -> Callable[[Any], Any]:
    def parse(raw: Any) -> Any:
        return None if raw is None else instantiate_from_payload(cls, raw)
    return parse


def enum_or_raw(enum_cls: Type[Enum]) -> Callable[[Any], Any]:
    """Parser mapping a known code to its enum member and passing unknown codes through."""
    def parse(raw: Any) -> Any:
        if raw is None:
            return None
        try:
            return enum_cls(raw)
        except ValueError:
            return raw
    return parse


def text_or_empty(raw: Any) -> str:
    return "" if raw is None else str(raw)


def float_or_str(value: Any) -> float:
    """Sort orders arrive as ints, floats or quoted numbers such as ``"-99"``."""
    if isinstance(value, bool):
        raise ValueError(f"not a valid float value: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError as exc:
            raise ValueError(f"not a valid float value: {value}") from exc
    raise ValueError(f"not a valid float value: {value!r}")


def _to_wire(value: Any, omit_none: bool) -> Any:
    if isinstance(value, DateTime):
        return value.to_wire()
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return to_wire_dict(value, omit_none=omit_none)
    if isinstance(value, (list, tuple)):
        return [_to_wire(item, omit_none) for item in value]
    if isinstance(value, dict):
        return {k: _to_wire(v, omit_none) for k, v in value.items()}
    return value


def to_wire_dict(obj: Any, *, omit_none: bool = False) -> dict[str, Any]:
    """Serialize a dataclass to its JSON shape, using the wire names of its fields."""
    result: dict[str, Any] = {}
    for spec in fields(obj):
        if spec.name == 'new_api_kwargs':
            continue
        value = getattr(obj, spec.name)
        if value is None and omit_none:
            continue
        result[_wire_name(spec)] = _to_wire(value, omit_none)
    extra = getattr(obj, 'new_api_kwargs', None)
    if extra:
        for key, value in extra.items():
            result.setdefault(key, value)
    return result


def is_uuid(value: str) -> bool:
    """Quick shape test: 36 characters in hex groups of 8-4-4-4-12."""
    if not isinstance(value, str) or len(value) != 36:
        return False
    groups = value.split('-')
    if tuple(len(group) for group in groups) != UUID_GROUP_LENGTHS:
        return False
    return all(all(char in string.hexdigits for char in group) for group in groups)


def check_uuid(value: str, field_name: str) -> None:
    if not is_uuid(value):
        raise InvalidValueError(f"Not a valid uuid '{value}' for field '{field_name}'")


def is_integer_id(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and value.strip().lstrip('-').isdigit()
