"""
Call orchestration: validate every parameter, then encode and submit.

One ``MoveCallOrchestrator`` serves one function-invocation UI session.
Each ``invoke`` is an attempt:

    IDLE -> VALIDATING -> INVALID (error flags set, nothing encoded)
                       -> ENCODING -> ENCODED / SUBMITTED

Parameters are validated concurrently and results are written back by index,
so error flags always line up with the parameter list. Every attempt takes a
new generation number; an attempt whose validation finishes after a newer
attempt started is reported as STALE and leaves the session's error flags
alone.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from movecall.classify import strip_tx_context, type_name
from movecall.config import NetworkContext
from movecall.encoder import EncodedArgument, allocate, encode_value
from movecall.errors import ArgumentCountError
from movecall.logging import JsonlLogger
from movecall.resolver import ObjectTypeResolver
from movecall.transaction import Transaction, TransactionBuilder
from movecall.types import (
    FunctionSignature,
    NormalizedType,
    RawInput,
    parse_type_tag,
    substitute_type_parameters,
)
from movecall.validator import ValidationDetail, validate_detailed

logger = logging.getLogger(__name__)


class InvocationState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    INVALID = "invalid"
    ENCODING = "encoding"
    ENCODED = "encoded"
    SUBMITTED = "submitted"
    STALE = "stale"


class Submitter(Protocol):
    async def submit(self, transaction: TransactionBuilder) -> dict[str, Any]:
        """Sign and execute (or dry-run) the transaction; return the service's response."""
        ...


@dataclass
class InvocationOutcome:
    state: InvocationState
    generation: int
    errors: list[bool] = field(default_factory=list)
    messages: list[str | None] = field(default_factory=list)
    # True where the verdict is False only because the object lookup failed
    unknown: list[bool] = field(default_factory=list)
    arguments: list[EncodedArgument] = field(default_factory=list)
    transaction: TransactionBuilder | None = None
    submission: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.state in (InvocationState.ENCODED, InvocationState.SUBMITTED)


def error_message(t: NormalizedType) -> str:
    return f"Invalid value for type {type_name(t)}"


class MoveCallOrchestrator:
    def __init__(
        self,
        resolver: ObjectTypeResolver,
        context: NetworkContext,
        *,
        submitter: Submitter | None = None,
        transaction_factory: Callable[[], TransactionBuilder] = Transaction,
        event_log: JsonlLogger | None = None,
    ) -> None:
        self.resolver = resolver
        self.context = context
        self.submitter = submitter
        self.transaction_factory = transaction_factory
        self.event_log = event_log
        self.state = InvocationState.IDLE
        self.generation = 0
        self.errors: list[bool] = []

    @staticmethod
    def parameters(function: FunctionSignature) -> list[NormalizedType]:
        """Parameters the user fills in: the declared list minus a trailing TxContext."""
        return strip_tx_context(function.parameters)

    def bind_parameters(self, function: FunctionSignature, type_arguments: Sequence[str]) -> list[NormalizedType]:
        """
        Stripped parameters with type arguments substituted for type parameters.

        Raises:
            ArgumentCountError: If the number of type arguments does not match the signature.
            TypeTagParseError: If a type argument is not a valid type tag.
        """
        params = self.parameters(function)
        if len(type_arguments) != function.type_parameter_count:
            raise ArgumentCountError("type argument(s)", function.type_parameter_count, len(type_arguments))
        if not type_arguments:
            return params
        bound = [parse_type_tag(a) for a in type_arguments]
        return [substitute_type_parameters(p, bound) for p in params]

    def _event(self, name: str, **fields: object) -> None:
        if self.event_log is not None:
            self.event_log.event(name, **fields)

    async def _validate_all(self, raw_inputs: Sequence[RawInput], params: Sequence[NormalizedType]) -> list[ValidationDetail]:
        # gather preserves argument order, so results line up with params
        return list(
            await asyncio.gather(
                *(validate_detailed(raw, t, self.resolver, self.context) for raw, t in zip(raw_inputs, params))
            )
        )

    async def invoke(
        self,
        target: str,
        function: FunctionSignature,
        raw_inputs: Sequence[RawInput],
        type_arguments: Sequence[str] = (),
    ) -> InvocationOutcome:
        """
        Run one invocation attempt for `target` (``0xPKG::module::function``).

        Nothing is encoded or submitted unless every parameter validates.

        Raises:
            ArgumentCountError: If raw inputs or type arguments do not match the signature.
        """
        self.generation += 1
        generation = self.generation

        params = self.bind_parameters(function, type_arguments)
        if len(raw_inputs) != len(params):
            raise ArgumentCountError("argument(s)", len(params), len(raw_inputs))

        self.state = InvocationState.VALIDATING
        self._event("validation_started", target=target, generation=generation, params=len(params))
        details = await self._validate_all(raw_inputs, params)

        if generation != self.generation:
            logger.info(f"Discarding stale validation for {target} (generation {generation} < {self.generation})")
            self._event("validation_stale", target=target, generation=generation, current=self.generation)
            return InvocationOutcome(InvocationState.STALE, generation)

        errors = [not d.valid for d in details]
        outcome = InvocationOutcome(
            InvocationState.INVALID,
            generation,
            errors=errors,
            messages=[error_message(t) if err else None for t, err in zip(params, errors)],
            unknown=[d.unknown for d in details],
        )
        self.errors = errors

        if any(errors):
            bad = [i for i, err in enumerate(errors) if err]
            logger.info(f"Not invoking {target}: invalid argument(s) at {bad}")
            self._event("validation_failed", target=target, generation=generation, invalid=bad)
            self._finish(outcome, target)
            return outcome

        self.state = InvocationState.ENCODING
        try:
            tx = self.transaction_factory()
            outcome.arguments = [encode_value(raw, t) for raw, t in zip(raw_inputs, params)]
            handles = [allocate(tx, e) for e in outcome.arguments]
            tx.move_call(target, handles, list(type_arguments))
            outcome.transaction = tx
            outcome.state = InvocationState.ENCODED

            if self.submitter is not None:
                self._event("submitting", target=target, generation=generation)
                outcome.submission = await self.submitter.submit(tx)
                outcome.state = InvocationState.SUBMITTED
        finally:
            if generation == self.generation:
                self.state = InvocationState.IDLE

        logger.debug(f"Invocation of {target} finished: {outcome.state.value}")
        self._finish(outcome, target)
        return outcome

    def _finish(self, outcome: InvocationOutcome, target: str) -> None:
        if outcome.generation == self.generation:
            self.state = InvocationState.IDLE
        if self.event_log is not None:
            self.event_log.invocation_row(
                {
                    "target": target,
                    "generation": outcome.generation,
                    "state": outcome.state.value,
                    "errors": outcome.errors,
                    "unknown": outcome.unknown,
                }
            )
