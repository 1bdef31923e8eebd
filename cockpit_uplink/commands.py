#!/usr/bin/env python3

"""
Commands for Cockpit-Uplink
The command union that makes up an instruction stream, its compact
wire serialization, and the InstructionStream container.

Every command serializes to a tagged object {"f": <tag>, "a": <payload>}.
A stream joins those objects with a separator; the remote command server
receives the stream framed in brackets.

Part of the Cockpit-Uplink project.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from cockpit_uplink import constants

Number = Union[int, float]


def _number(value: Number) -> Number:
    """Collapse integral floats so 1.0 goes out on the wire as 1"""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _dumps(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


def _normalize_args(args: Optional[Iterable[Any]]) -> Tuple[str, ...]:
    if not args:
        return ()
    return tuple(str(arg) for arg in args)


@dataclass(frozen=True)
class Command:
    """Base class for all commands in an instruction stream"""
    tag: ClassVar[str] = ""

    def payload(self) -> Dict[str, Any]:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        return {"f": self.tag, "a": self.payload()}

    def wire_objects(self) -> List[Dict[str, Any]]:
        """
        Objects this command contributes to the wire, in order.

        Returns:
            list: One object for most commands; commands carrying a
                  post-wait contribute a trailing Wait object as well
        """
        return [self.to_dict()]

    def serialize(self) -> str:
        return constants.STREAM_SEPARATOR.join(_dumps(obj) for obj in self.wire_objects())


@dataclass(frozen=True)
class WaitCommand(Command):
    """Pause the remote interpreter for delay milliseconds"""
    tag: ClassVar[str] = constants.TAG_WAIT
    delay: int

    def payload(self) -> Dict[str, Any]:
        return {"dt": int(self.delay)}


@dataclass(frozen=True)
class ActionCommand(Command):
    """Set a clickable control to value_dn, wait delay ms, then set value_up"""
    tag: ClassVar[str] = constants.TAG_ACTION
    device_id: int
    code: int
    value_dn: Number
    value_up: Number = 0
    delay: int = 0
    post_wait: int = 0

    def payload(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "dev": int(self.device_id),
            "code": int(self.code),
            "dn": _number(self.value_dn),
        }
        if self.value_up != 0:
            result["up"] = _number(self.value_up)
        if self.delay != 0:
            result["dt"] = int(self.delay)
        return result

    def wire_objects(self) -> List[Dict[str, Any]]:
        objects = [self.to_dict()]
        if self.post_wait > 0:
            objects.append(WaitCommand(self.post_wait).to_dict())
        return objects

    def with_post_wait(self, post_wait: int) -> "ActionCommand":
        return replace(self, post_wait=max(0, int(post_wait)))


@dataclass(frozen=True)
class MarkerCommand(Command):
    """Breadcrumb the remote interpreter echoes back through telemetry"""
    tag: ClassVar[str] = constants.TAG_MARKER
    mark: str

    def payload(self) -> Dict[str, Any]:
        return {"mark": self.mark}


@dataclass(frozen=True)
class QueryCommand(Command):
    """Ask the remote interpreter to evaluate fn and answer through telemetry"""
    tag: ClassVar[str] = constants.TAG_QUERY
    fn: str
    args: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "args", _normalize_args(self.args))

    def payload(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"fn": self.fn}
        if self.args:
            result["prm"] = list(self.args)
        return result


@dataclass(frozen=True)
class ExecCommand(Command):
    """Call a named remote procedure with positional string arguments"""
    tag: ClassVar[str] = constants.TAG_EXEC
    fn: str
    args: Tuple[str, ...] = ()
    post_wait: int = 0

    def __post_init__(self):
        object.__setattr__(self, "args", _normalize_args(self.args))

    def payload(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"fn": self.fn}
        if self.args:
            result["prm"] = list(self.args)
        return result

    def wire_objects(self) -> List[Dict[str, Any]]:
        objects = [self.to_dict()]
        if self.post_wait > 0:
            objects.append(WaitCommand(self.post_wait).to_dict())
        return objects


@dataclass(frozen=True)
class AbortCommand(Command):
    """Stop executing the stream; ERROR-prefixed messages reach the user"""
    tag: ClassVar[str] = constants.TAG_ABORT
    message: str

    @property
    def is_user_visible(self) -> bool:
        return self.message.startswith(constants.ERROR_PREFIX)

    def payload(self) -> Dict[str, Any]:
        return {"msg": self.message}


@dataclass(frozen=True)
class IfCommand(Command):
    """Open a conditional block evaluated remotely"""
    tag: ClassVar[str] = constants.TAG_IF
    condition: str
    expected: bool = True
    args: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "args", _normalize_args(self.args))

    def payload(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"cond": self.condition, "expt": bool(self.expected)}
        if self.args:
            result["prm"] = list(self.args)
        return result


@dataclass(frozen=True)
class EndIfCommand(Command):
    tag: ClassVar[str] = constants.TAG_END_IF
    condition: str

    def payload(self) -> Dict[str, Any]:
        return {"cond": self.condition}


@dataclass(frozen=True)
class WhileCommand(Command):
    """Open a loop repeated while condition == expected, bounded by timeout iterations"""
    tag: ClassVar[str] = constants.TAG_WHILE
    condition: str
    expected: bool = True
    timeout: int = 0
    args: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "args", _normalize_args(self.args))

    def payload(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"cond": self.condition, "expt": bool(self.expected)}
        if self.timeout:
            result["tout"] = int(self.timeout)
        if self.args:
            result["prm"] = list(self.args)
        return result


@dataclass(frozen=True)
class EndWhileCommand(Command):
    tag: ClassVar[str] = constants.TAG_END_WHILE
    condition: str

    def payload(self) -> Dict[str, Any]:
        return {"cond": self.condition}


@dataclass
class InstructionStream:
    """
    Ordered sequence of commands owned by a single builder.

    The stream is cleared and rebuilt between queries; str() renders the
    separator-joined commands and to_wire() adds the framing the command
    server expects.
    """
    _commands: List[Command] = field(default_factory=list)

    def append(self, command: Command) -> None:
        self._commands.append(command)

    def extend(self, commands: Iterable[Command]) -> None:
        self._commands.extend(commands)

    def truncate(self, length: int) -> None:
        """Drop every command after the first length commands"""
        del self._commands[length:]

    def clear(self) -> None:
        self._commands.clear()

    @property
    def commands(self) -> Tuple[Command, ...]:
        return tuple(self._commands)

    @property
    def query_count(self) -> int:
        return sum(1 for cmd in self._commands if isinstance(cmd, QueryCommand))

    def to_wire(self) -> str:
        return f"{constants.STREAM_OPEN}{self}{constants.STREAM_CLOSE}"

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands)

    def __getitem__(self, index: int) -> Command:
        return self._commands[index]

    def __str__(self) -> str:
        return constants.STREAM_SEPARATOR.join(cmd.serialize() for cmd in self._commands)


def stream_of(commands: Sequence[Command]) -> InstructionStream:
    """Build a stream holding the given commands"""
    stream = InstructionStream()
    stream.extend(commands)
    return stream
