"""Activity and work-item descriptor builders for Design Automation.

WHY: An activity tells Design Automation how to run an engine: which
executable, which app bundle to load, where the inputs land on the
command line, and which files come back. The four supported engines
agree on the parameter contract but each has its own command-line
dialect. Callers should describe a job once (inputs, outputs, optional
script) and get the right dialect for the engine.

HOW: One builder, parameterized by an _EngineProfile per EngineKind:
  1. Parse the engine id into an EngineKind (unknown → error)
  2. Seed the descriptor: engine, description, app bundle reference
  3. Start the command line with the engine's base invocation
  4. Inputs: input switch + one path placeholder each, `get` parameters
  5. Outputs: `put` parameters only (never on the command line)
  6. Script: `settings.script` plus the script switch, after the inputs
The result is a frozen ActivityDescriptor; to_dict() renders the JSON
body the service expects.

RULES:
- All validation happens before a descriptor exists and before any
  network call: unknown engine, too many inputs, duplicate names
- Parameter names are unique across inputs and outputs combined
- 3dsMax accepts at most one input (the scene file)
- AutoCAD, Revit and Inventor render commandLine as a one-element list;
  3dsMax renders it as a single string
- Scripts are only used by AutoCAD and 3dsMax; other engines drop them
  with a warning
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from forge_client.errors import ActivityValidationError
from forge_client.core.engines import EngineId, EngineKind

logger = logging.getLogger(__name__)

VERB_GET = "get"
VERB_PUT = "put"

SCRIPT_PLACEHOLDER = "$(settings[script].path)"


# ---------------------------------------------------------------------------
# Caller-facing descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InputDescriptor:
    """An activity input: a file the engine reads."""

    name: str
    description: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InputDescriptor:
        return cls(name=data["name"], description=data.get("description"))


@dataclass(frozen=True)
class OutputDescriptor:
    """An activity output: a file the engine writes.

    local_name is the file name the engine produces in its working
    folder; the service uploads it under the parameter's name.
    """

    name: str
    description: str | None = None
    local_name: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OutputDescriptor:
        return cls(
            name=data["name"],
            description=data.get("description"),
            local_name=data.get("localName"),
        )


@dataclass(frozen=True)
class ParameterDescriptor:
    """One entry of an activity's parameter contract."""

    name: str
    verb: str
    description: str | None = None
    local_name: str | None = None

    def to_dict(self) -> dict[str, str]:
        data = {"verb": self.verb}
        if self.description:
            data["description"] = self.description
        if self.local_name:
            data["localName"] = self.local_name
        return data


@dataclass(frozen=True)
class ActivityDescriptor:
    """A fully built activity, ready to be posted.

    RULES:
    - activity_id is None when the descriptor is a new version of an
      existing activity (the service assigns the version)
    - command_line holds the individual tokens, in invocation order
    - parameters is a read-only mapping in registration order
    """

    engine: str
    kind: EngineKind
    description: str
    command_line: tuple[str, ...]
    parameters: Mapping[str, ParameterDescriptor] = field(hash=False)
    appbundles: tuple[str, ...]
    activity_id: str | None = None
    script: Any = field(default=None, hash=False)

    def command_line_value(self) -> str | list[str]:
        """The commandLine value in the shape the engine expects."""
        joined = " ".join(self.command_line)
        if _PROFILES[self.kind].single_string:
            return joined
        return [joined]

    def to_dict(self) -> dict[str, Any]:
        """Render the JSON body for the activities endpoints."""
        body: dict[str, Any] = {}
        if self.activity_id is not None:
            body["id"] = self.activity_id
        body["commandLine"] = self.command_line_value()
        body["parameters"] = {
            name: parameter.to_dict() for name, parameter in self.parameters.items()
        }
        body["description"] = self.description
        body["engine"] = self.engine
        body["appbundles"] = list(self.appbundles)
        if self.script is not None:
            body["settings"] = {"script": self.script}
        return body


# ---------------------------------------------------------------------------
# Per-engine command-line dialects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _EngineProfile:
    executable: str
    input_switch: str
    loads_bundle: bool = True
    max_inputs: int | None = None
    quote_paths: bool = False
    script_switch: tuple[str, ...] = field(default_factory=tuple)
    supports_script: bool = False
    single_string: bool = False

    def base(self, bundle_name: str) -> str:
        executable = f"$(engine.path)\\{self.executable}"
        if not self.loads_bundle:
            return executable
        return f"{executable} /al $(appbundles[{bundle_name}].path)"

    def placeholder(self, path: str) -> str:
        if self.quote_paths:
            return f'"{path}"'
        return path


_PROFILES: dict[EngineKind, _EngineProfile] = {
    EngineKind.AUTOCAD: _EngineProfile(
        executable="accoreconsole.exe",
        input_switch="/i",
        script_switch=("/s",),
        supports_script=True,
    ),
    EngineKind.THREEDSMAX: _EngineProfile(
        executable="3dsmaxbatch.exe",
        input_switch="-sceneFile",
        loads_bundle=False,
        max_inputs=1,
        quote_paths=True,
        supports_script=True,
        single_string=True,
    ),
    EngineKind.REVIT: _EngineProfile(
        executable="revitcoreconsole.exe",
        input_switch="/i",
    ),
    EngineKind.INVENTOR: _EngineProfile(
        executable="InventorCoreConsole.exe",
        input_switch="/i",
    ),
}


def _profile_for(kind: EngineKind) -> _EngineProfile:
    profile = _PROFILES.get(kind)
    if profile is None:
        raise ActivityValidationError(f"No command-line profile for engine '{kind.value}'.")
    return profile


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_activity(
    engine: str,
    description: str,
    owner_id: str,
    bundle_name: str,
    bundle_alias: str,
    inputs: Iterable[InputDescriptor | Mapping[str, Any]] = (),
    outputs: Iterable[OutputDescriptor | Mapping[str, Any]] = (),
    script: Any = None,
    activity_id: str | None = None,
) -> ActivityDescriptor:
    """Build an engine-specific activity descriptor.

    Args:
        engine: Qualified engine id, e.g. "Autodesk.AutoCAD+24_1".
        description: Human-readable activity description.
        owner_id: Owner of the app bundle (the app's client id).
        bundle_name: App bundle name.
        bundle_alias: App bundle alias the activity should pin.
        inputs: Input descriptors, in command-line order.
        outputs: Output descriptors.
        script: Optional script reference (AutoCAD and 3dsMax only).
        activity_id: Id for a new activity; None for a new version.

    Returns:
        A frozen ActivityDescriptor.

    Raises:
        ActivityValidationError: unknown engine, too many inputs for the
            engine, or a parameter name used twice.
    """
    kind = EngineId.parse(engine).kind
    profile = _profile_for(kind)

    input_list = [_coerce(item, InputDescriptor) for item in inputs]
    output_list = [_coerce(item, OutputDescriptor) for item in outputs]
    _check_names([item.name for item in input_list] + [item.name for item in output_list])
    if profile.max_inputs is not None and len(input_list) > profile.max_inputs:
        raise ActivityValidationError(
            f"{kind.value} engine supports at most {profile.max_inputs} input file(s), "
            f"got {len(input_list)}."
        )

    command_line = [profile.base(bundle_name)]
    parameters: dict[str, ParameterDescriptor] = {}

    if input_list:
        command_line.append(profile.input_switch)
        for item in input_list:
            command_line.append(profile.placeholder(f"$(args[{item.name}].path)"))
            parameters[item.name] = ParameterDescriptor(
                name=item.name, verb=VERB_GET, description=item.description,
            )

    for item in output_list:
        parameters[item.name] = ParameterDescriptor(
            name=item.name,
            verb=VERB_PUT,
            description=item.description,
            local_name=item.local_name,
        )

    if not script:
        script = None
    if script is not None and not profile.supports_script:
        logger.warning("%s engine does not take a script; ignoring it", kind.value)
        script = None
    if script is not None:
        command_line.extend(profile.script_switch)
        command_line.append(profile.placeholder(SCRIPT_PLACEHOLDER))

    return ActivityDescriptor(
        engine=engine,
        kind=kind,
        description=description,
        command_line=tuple(command_line),
        parameters=MappingProxyType(parameters),
        appbundles=(f"{owner_id}.{bundle_name}+{bundle_alias}",),
        activity_id=activity_id,
        script=script,
    )


@dataclass(frozen=True)
class WorkItemInput:
    """Binds an activity input to a URL the engine downloads from."""

    name: str
    url: str
    local_name: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WorkItemInput:
        return cls(name=data["name"], url=data["url"], local_name=data.get("localName"))


@dataclass(frozen=True)
class WorkItemOutput:
    """Binds an activity output to a URL the result is uploaded to."""

    name: str
    url: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WorkItemOutput:
        return cls(name=data["name"], url=data["url"])


def build_work_item(
    activity_id: str,
    inputs: Sequence[WorkItemInput | Mapping[str, Any]] = (),
    outputs: Sequence[WorkItemOutput | Mapping[str, Any]] = (),
) -> dict[str, Any]:
    """Build the JSON body for a new work item.

    RULES:
    - activity_id is the qualified id, e.g. "owner.Activity+prod"
    - Argument names must be unique across inputs and outputs
    """
    input_list = [_coerce(item, WorkItemInput) for item in inputs]
    output_list = [_coerce(item, WorkItemOutput) for item in outputs]
    _check_names([item.name for item in input_list] + [item.name for item in output_list])

    arguments: dict[str, dict[str, str]] = {}
    for item in input_list:
        arguments[item.name] = {"url": item.url}
        if item.local_name:
            arguments[item.name]["localName"] = item.local_name
    for item in output_list:
        arguments[item.name] = {"verb": VERB_PUT, "url": item.url}

    return {"activityId": activity_id, "arguments": arguments}


def _coerce(item: Any, cls: type) -> Any:
    if isinstance(item, cls):
        return item
    if isinstance(item, Mapping):
        try:
            return cls.from_dict(item)
        except KeyError as exc:
            raise ActivityValidationError(
                f"{cls.__name__} is missing required field {exc.args[0]!r}."
            ) from exc
    raise ActivityValidationError(
        f"Expected {cls.__name__} or a mapping, got {type(item).__name__}."
    )


def _check_names(names: list[str]) -> None:
    seen: set[str] = set()
    for name in names:
        if not name:
            raise ActivityValidationError("Parameter names must be non-empty.")
        if name in seen:
            raise ActivityValidationError(
                f"Parameter name '{name}' is used more than once; "
                "input and output names must be unique."
            )
        seen.add(name)
