"""JSON fact document loader.

Reads the fact document a front end writes for one compilation unit and
builds the domain FactSet. Every structural problem is reported as
FactFormatError with the dotted path of the offending entry.

Document layout (all top-level keys optional):

    {
      "registrations": [
        {"service": "IRepo<T>", "implementation": {"type": "Repo<T>"},
         "lifetime": "scoped", "location": "Startup.cs:12:8"}
      ],
      "shapes": [
        {"type": "Repo<T>", "capabilities": ["IRepo<T>"],
         "dependencies": ["IDbContext", {"service": "ILogger", "optional": true}],
         "disposable": true}
      ],
      "traces": [
        {"name": "Run", "async": true,
         "events": [{"kind": "create", "handle": "s"}, {"kind": "dispose", "handle": "s"}]}
      ],
      "storages": [{"member": "_sp", "type": "IServiceProvider", "static": true}]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from dicheck.domain.exceptions.facts import FactFormatError
from dicheck.domain.model.enums import EscapeSink, HandleKind, Lifetime, ProviderType
from dicheck.domain.model.fact_set import FactSet
from dicheck.domain.model.location import Location
from dicheck.domain.model.registration import (
    FactoryImplementation,
    InstanceImplementation,
    Registration,
    TypeImplementation,
)
from dicheck.domain.model.scope_event import (
    BasicBlock,
    Create,
    Dispose,
    Escape,
    ProcedureTrace,
    Resolve,
    Use,
)
from dicheck.domain.model.service_identity import ServiceIdentity
from dicheck.domain.model.storage import StorageFact
from dicheck.domain.model.type_shape import ParameterDependency, TypeShape
from dicheck.infrastructure.type_parser import parse_type

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from dicheck.domain.model.registration import Implementation
    from dicheck.domain.model.scope_event import ScopeEvent
    from dicheck.domain.model.type_ref import TypeRef

logger = logging.getLogger(__name__)

_ENUMERABLE_NAMES = frozenset({"IEnumerable", "System.Collections.Generic.IEnumerable"})

_PROVIDER_TYPES = {provider.value: provider for provider in ProviderType if provider.is_provider}


def load_facts_file(path: Path) -> FactSet:
    """Load a fact document from a JSON file.

    Args:
        path: Path to the JSON document

    Returns:
        Parsed fact set

    Raises:
        FactFormatError: If the file cannot be read or is malformed
    """
    if path is None:
        raise TypeError("path must not be None")

    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FactFormatError(str(path), "file not found") from e
    except PermissionError as e:
        raise FactFormatError(str(path), "permission denied") from e
    except UnicodeDecodeError as e:
        raise FactFormatError(str(path), f"encoding error: {e}") from e

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise FactFormatError(str(path), f"invalid JSON at line {e.lineno}: {e.msg}") from e

    return load_facts(document)


def load_facts(document: Mapping[str, Any]) -> FactSet:
    """Build a FactSet from a decoded fact document.

    Raises:
        FactFormatError: If any entry is malformed
    """
    if not isinstance(document, dict):
        raise FactFormatError("$", f"expected object, got {type(document).__name__}")

    registrations = tuple(
        _read_registration(entry, f"registrations[{i}]", i)
        for i, entry in enumerate(_list(document, "registrations", "$"))
    )
    shapes = tuple(
        _read_shape(entry, f"shapes[{i}]") for i, entry in enumerate(_list(document, "shapes", "$"))
    )
    traces = tuple(
        _read_trace(entry, f"traces[{i}]") for i, entry in enumerate(_list(document, "traces", "$"))
    )
    storages = tuple(
        _read_storage(entry, f"storages[{i}]") for i, entry in enumerate(_list(document, "storages", "$"))
    )

    logger.debug(
        "Loaded %d registrations, %d shapes, %d traces, %d storages",
        len(registrations),
        len(shapes),
        len(traces),
        len(storages),
    )
    return _guard(
        "$.shapes",
        lambda: FactSet(registrations=registrations, shapes=shapes, traces=traces, storages=storages),
    )


# =============================================================================
# Primitive readers
# =============================================================================


def _list(entry: Mapping[str, Any], key: str, path: str) -> list[Any]:
    value = entry.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise FactFormatError(f"{path}.{key}", f"expected list, got {type(value).__name__}")
    return value


def _object(value: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise FactFormatError(path, f"expected object, got {type(value).__name__}")
    return value


def _string(entry: Mapping[str, Any], key: str, path: str, *, required: bool = True) -> str | None:
    value = entry.get(key)
    if value is None:
        if required:
            raise FactFormatError(f"{path}.{key}", "missing required field")
        return None
    if not isinstance(value, str) or not value:
        raise FactFormatError(f"{path}.{key}", "expected non-empty string")
    return value


def _flag(entry: Mapping[str, Any], key: str, path: str) -> bool:
    value = entry.get(key, False)
    if not isinstance(value, bool):
        raise FactFormatError(f"{path}.{key}", f"expected boolean, got {type(value).__name__}")
    return value


T = TypeVar("T")


def _guard(path: str, build: Callable[[], T]) -> T:
    """Run a constructor, reporting model validation errors at path."""
    try:
        return build()
    except (TypeError, ValueError) as e:
        raise FactFormatError(path, str(e)) from e


def _type(text: str, path: str, parameters: Iterable[str] | None = None) -> TypeRef:
    return _guard(path, lambda: parse_type(text, parameters))


def _location(value: Any, path: str) -> Location:
    """Read "file:line[:column]" or {"file", "line", "column", ...}."""
    if value is None:
        return Location.unknown()

    if isinstance(value, str):
        parts = value.rsplit(":", 2)
        numbers: list[int] = []
        # trailing numeric components, file may itself contain ':'
        while len(parts) > 1 and parts[-1].isdigit():
            numbers.insert(0, int(parts.pop()))
        if not numbers:
            raise FactFormatError(path, f"expected 'file:line[:column]', got '{value}'")
        file = ":".join(parts)
        line = numbers[0]
        column = numbers[1] if len(numbers) > 1 else 0
        return _guard(path, lambda: Location(file=Path(file), line=line, column=column))

    entry = _object(value, path)
    file = _string(entry, "file", path)
    line = entry.get("line")
    if not isinstance(line, int) or isinstance(line, bool):
        raise FactFormatError(f"{path}.line", "expected integer")
    return _guard(
        path,
        lambda: Location(
            file=Path(file),
            line=line,
            column=entry.get("column", 0),
            end_line=entry.get("end_line"),
            end_column=entry.get("end_column"),
        ),
    )


# =============================================================================
# Registrations and shapes
# =============================================================================


def _identity(entry: Mapping[str, Any], path: str, parameters: Iterable[str] | None = None) -> ServiceIdentity:
    """Read service identity from "service", "key" and "keyed" fields."""
    service = _type(_string(entry, "service", path), f"{path}.service", parameters)
    key = entry.get("key")
    keyed = _flag(entry, "keyed", path) or key is not None
    if key is not None and not isinstance(key, str | int | bool):
        raise FactFormatError(f"{path}.key", f"unsupported key type {type(key).__name__}")
    if keyed:
        return ServiceIdentity.keyed(service, key)
    return ServiceIdentity(type=service)


def _dependency(value: Any, path: str, parameters: Iterable[str] | None = None) -> ParameterDependency:
    """Read a dependency: "IFoo", "IEnumerable<IFoo>" or an object."""
    if isinstance(value, str):
        required = _type(value, path, parameters)
        if required.name in _ENUMERABLE_NAMES and required.arity == 1:
            return ParameterDependency(required=ServiceIdentity(type=required.arguments[0]), is_enumerable=True)
        return ParameterDependency(required=ServiceIdentity(type=required))

    entry = _object(value, path)
    identity = _identity(entry, path, parameters)
    is_enumerable = _flag(entry, "enumerable", path)
    if not is_enumerable and identity.type.name in _ENUMERABLE_NAMES and identity.type.arity == 1:
        identity = identity.with_type(identity.type.arguments[0])
        is_enumerable = True

    return ParameterDependency(
        required=identity,
        is_enumerable=is_enumerable,
        has_default_or_optional=_flag(entry, "optional", path),
        name=_string(entry, "name", path, required=False),
    )


def _implementation(value: Any, path: str) -> Implementation:
    entry = _object(value, path)
    if "type" in entry:
        explicit = entry.get("explicit_types", True)
        if not isinstance(explicit, bool):
            raise FactFormatError(f"{path}.explicit_types", "expected boolean")
        return TypeImplementation(type=_type(_string(entry, "type", path), f"{path}.type"), explicit_types=explicit)

    if "factory" in entry:
        calls = entry["factory"]
        if calls is None:
            return FactoryImplementation(calls=None)
        if not isinstance(calls, list):
            raise FactFormatError(f"{path}.factory", "expected list or null")
        return FactoryImplementation(
            calls=tuple(_dependency(call, f"{path}.factory[{i}]") for i, call in enumerate(calls))
        )

    if "instance" in entry:
        text = entry["instance"]
        if text is None:
            return InstanceImplementation()
        if not isinstance(text, str):
            raise FactFormatError(f"{path}.instance", "expected type string or null")
        return InstanceImplementation(type=_type(text, f"{path}.instance"))

    raise FactFormatError(path, "expected one of 'type', 'factory', 'instance'")


def _read_registration(value: Any, path: str, position: int) -> Registration:
    entry = _object(value, path)
    lifetime_text = _string(entry, "lifetime", path)
    try:
        lifetime = Lifetime.parse(lifetime_text)
    except ValueError as e:
        raise FactFormatError(f"{path}.lifetime", str(e)) from e

    index = entry.get("index", position)
    if not isinstance(index, int) or isinstance(index, bool):
        raise FactFormatError(f"{path}.index", "expected integer")

    service = _identity(entry, path)
    implementation = _implementation(entry.get("implementation"), f"{path}.implementation")
    location = _location(entry.get("location"), f"{path}.location")

    return _guard(
        path,
        lambda: Registration(
            service=service,
            implementation=implementation,
            lifetime=lifetime,
            location=location,
            insertion_index=index,
            is_conditional=_flag(entry, "conditional", path),
            method=_string(entry, "method", path, required=False),
        ),
    )


def _read_shape(value: Any, path: str) -> TypeShape:
    entry = _object(value, path)
    declared = entry.get("type_parameters")
    if declared is not None and (
        not isinstance(declared, list) or not all(isinstance(p, str) and p for p in declared)
    ):
        raise FactFormatError(f"{path}.type_parameters", "expected list of names")

    identity = _type(_string(entry, "type", path), f"{path}.type", declared)
    parameters = declared if declared is not None else tuple(identity.parameters())
    capabilities: set[TypeRef] = set()
    for i, text in enumerate(_list(entry, "capabilities", path)):
        if not isinstance(text, str):
            raise FactFormatError(f"{path}.capabilities[{i}]", "expected type string")
        capabilities.add(_type(text, f"{path}.capabilities[{i}]", parameters))
    dependencies = tuple(
        _dependency(dep, f"{path}.dependencies[{i}]", parameters)
        for i, dep in enumerate(_list(entry, "dependencies", path))
    )

    return _guard(
        path,
        lambda: TypeShape(
            identity=identity,
            capabilities=frozenset(capabilities),
            constructor_dependencies=dependencies,
            is_disposable=_flag(entry, "disposable", path),
            is_async_disposable=_flag(entry, "async_disposable", path),
        ),
    )


# =============================================================================
# Traces and storages
# =============================================================================


def _read_event(value: Any, path: str) -> ScopeEvent:
    entry = _object(value, path)
    kind = _string(entry, "kind", path)
    location = _location(entry.get("location"), f"{path}.location")

    match kind:
        case "create":
            return _guard(
                path,
                lambda: Create(
                    handle=_string(entry, "handle", path),
                    location=location,
                    is_async=_flag(entry, "async", path),
                    kind=HandleKind.ROOT_PROVIDER if _flag(entry, "root", path) else HandleKind.SCOPE,
                    guarded=_flag(entry, "guarded", path),
                ),
            )
        case "dispose":
            return _guard(path, lambda: Dispose(handle=_string(entry, "handle", path), location=location))
        case "resolve":
            service = _identity(entry, path) if "service" in entry else None
            return _guard(
                path,
                lambda: Resolve(
                    handle=_string(entry, "handle", path),
                    result=_string(entry, "result", path),
                    location=location,
                    service=service,
                ),
            )
        case "escape":
            sink_text = _string(entry, "sink", path, required=False) or EscapeSink.RETURN.value
            try:
                sink = EscapeSink(sink_text)
            except ValueError as e:
                raise FactFormatError(f"{path}.sink", f"unknown sink '{sink_text}'") from e
            return _guard(
                path,
                lambda: Escape(
                    value=_string(entry, "value", path),
                    sink=sink,
                    location=location,
                    target=_string(entry, "target", path, required=False),
                ),
            )
        case "use":
            return _guard(path, lambda: Use(value=_string(entry, "value", path), location=location))
        case _:
            raise FactFormatError(f"{path}.kind", f"unknown event kind '{kind}'")


def _read_events(entry: Mapping[str, Any], path: str) -> tuple[ScopeEvent, ...]:
    return tuple(_read_event(event, f"{path}.events[{i}]") for i, event in enumerate(_list(entry, "events", path)))


def _read_trace(value: Any, path: str) -> ProcedureTrace:
    entry = _object(value, path)
    name = _string(entry, "name", path)
    is_async = _flag(entry, "async", path)
    location = _location(entry["location"], f"{path}.location") if "location" in entry else None

    if "blocks" not in entry:
        events = _read_events(entry, path)
        return _guard(path, lambda: ProcedureTrace.linear(name, events, is_async=is_async, location=location))

    if "events" in entry:
        raise FactFormatError(path, "'events' and 'blocks' are mutually exclusive")

    blocks: list[BasicBlock] = []
    for i, block_value in enumerate(_list(entry, "blocks", path)):
        block_path = f"{path}.blocks[{i}]"
        block = _object(block_value, block_path)
        successors = _list(block, "successors", block_path)
        if not all(isinstance(s, str) for s in successors):
            raise FactFormatError(f"{block_path}.successors", "expected list of block ids")
        block_id = _string(block, "id", block_path)
        block_events = _read_events(block, block_path)
        blocks.append(
            _guard(block_path, lambda: BasicBlock(id=block_id, events=block_events, successors=tuple(successors)))
        )

    return _guard(
        path,
        lambda: ProcedureTrace(name=name, blocks=tuple(blocks), is_async=is_async, location=location),
    )


def _read_storage(value: Any, path: str) -> StorageFact:
    entry = _object(value, path)
    type_name = _string(entry, "type", path)
    simple_name = type_name.split("<", 1)[0].rstrip("?").rsplit(".", 1)[-1]
    value_type = _PROVIDER_TYPES.get(simple_name, ProviderType.OTHER)

    return _guard(
        path,
        lambda: StorageFact(
            member=_string(entry, "member", path),
            value_type=value_type,
            is_static=_flag(entry, "static", path),
            location=_location(entry.get("location"), f"{path}.location"),
            type_name=type_name,
        ),
    )
