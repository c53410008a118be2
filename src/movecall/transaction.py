"""
In-memory programmable transaction builder.

The encoder only needs three allocation primitives (pure input, object input,
``MakeMoveVec`` command); ``TransactionBuilder`` names them so any real SDK
can stand in. ``Transaction`` is the default implementation: it records
inputs and commands and renders them as JSON for inspection or hand-off to a
signing/submission service.
"""

from __future__ import annotations

import base64
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, Union

from movecall.bcs import encode_pure
from movecall.types import normalize_address


@dataclass(frozen=True)
class Input:
    index: int


@dataclass(frozen=True)
class Result:
    index: int


Argument = Union[Input, Result]


@dataclass(frozen=True)
class PureInput:
    type_name: str
    value: Any
    bcs: bytes


@dataclass(frozen=True)
class ObjectInput:
    object_id: str


@dataclass(frozen=True)
class MakeMoveVec:
    element_type: str | None
    elements: tuple[Argument, ...]


@dataclass(frozen=True)
class MoveCall:
    target: str
    type_arguments: tuple[str, ...]
    arguments: tuple[Argument, ...]


class TransactionBuilder(Protocol):
    def pure(self, type_name: str, value: Any) -> Argument: ...

    def object(self, object_id: str) -> Argument: ...

    def make_move_vec(self, element_type: str | None, elements: Sequence[Argument]) -> Argument: ...

    def move_call(
        self,
        target: str,
        arguments: Sequence[Argument],
        type_arguments: Sequence[str] = (),
    ) -> Argument: ...


def _argument_json(arg: Argument) -> dict[str, int]:
    if isinstance(arg, Input):
        return {"Input": arg.index}
    return {"Result": arg.index}


def _value_json(value: Any) -> Any:
    # Large integers do not survive JSON number parsing in most consumers
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, list):
        return [_value_json(v) for v in value]
    return value


@dataclass
class Transaction:
    sender: str | None = None
    inputs: list[PureInput | ObjectInput] = field(default_factory=list)
    commands: list[MakeMoveVec | MoveCall] = field(default_factory=list)

    def pure(self, type_name: str, value: Any) -> Argument:
        """Allocate a BCS-encoded pure input. Raises ValueError if `value` does not fit `type_name`."""
        self.inputs.append(PureInput(type_name, value, encode_pure(type_name, value)))
        return Input(len(self.inputs) - 1)

    def object(self, object_id: str) -> Argument:
        """Allocate an object input; the same object is only ever added once."""
        key = normalize_address(object_id)
        for i, existing in enumerate(self.inputs):
            if isinstance(existing, ObjectInput) and normalize_address(existing.object_id) == key:
                return Input(i)
        self.inputs.append(ObjectInput(object_id))
        return Input(len(self.inputs) - 1)

    def make_move_vec(self, element_type: str | None, elements: Sequence[Argument]) -> Argument:
        self.commands.append(MakeMoveVec(element_type, tuple(elements)))
        return Result(len(self.commands) - 1)

    def move_call(
        self,
        target: str,
        arguments: Sequence[Argument],
        type_arguments: Sequence[str] = (),
    ) -> Argument:
        self.commands.append(MoveCall(target, tuple(type_arguments), tuple(arguments)))
        return Result(len(self.commands) - 1)

    def to_dict(self) -> dict[str, Any]:
        inputs: list[dict[str, Any]] = []
        for inp in self.inputs:
            if isinstance(inp, PureInput):
                inputs.append(
                    {
                        "kind": "pure",
                        "type": inp.type_name,
                        "value": _value_json(inp.value),
                        "bcs": base64.b64encode(inp.bcs).decode("ascii"),
                    }
                )
            else:
                inputs.append({"kind": "object", "objectId": inp.object_id})

        commands: list[dict[str, Any]] = []
        for cmd in self.commands:
            if isinstance(cmd, MakeMoveVec):
                commands.append(
                    {
                        "MakeMoveVec": {
                            "type": cmd.element_type,
                            "elements": [_argument_json(a) for a in cmd.elements],
                        }
                    }
                )
            else:
                commands.append(
                    {
                        "MoveCall": {
                            "target": cmd.target,
                            "typeArguments": list(cmd.type_arguments),
                            "arguments": [_argument_json(a) for a in cmd.arguments],
                        }
                    }
                )
        return {"sender": self.sender, "inputs": inputs, "commands": commands}
