"""
Verdict coordinator: the state machine behind the password check.

Each settled input starts a new generation. Strength evaluation and the
breach lookup run as independent asyncio tasks and write their halves
of the same PipelineState. Completions from a superseded generation are
dropped without touching state.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import dataclasses
import logging
from typing import Callable

from breachaware.client import PwnedPasswordsClient
from breachaware.config import CheckerConfig
from breachaware.debounce import Debouncer
from breachaware.errors import HashingError, RemoteLookupError, StrengthEvaluationError
from breachaware.hasher import hash_password
from breachaware.models import BreachStatus, BreachVerdict, Phase, PipelineState
from breachaware.strength import StrengthEvaluator, ZxcvbnEvaluator, evaluate_strength

logger = logging.getLogger(__name__)

StateListener = Callable[[PipelineState], None]


class VerdictCoordinator:
    """Owns the pipeline state and sequences each check.

    Usage::

        async with VerdictCoordinator() as coordinator:
            coordinator.subscribe(print)
            coordinator.on_input("hunter2")
    """

    def __init__(
        self,
        client: PwnedPasswordsClient | None = None,
        evaluator: StrengthEvaluator | None = None,
        config: CheckerConfig | None = None,
    ):
        """Initialize coordinator.

        Args:
            client: Range API client (default: built from config, closed
                by this coordinator)
            evaluator: Strength evaluator (default: zxcvbn)
            config: Pipeline configuration (default: from environment)

        Raises:
            ValueError: if the configuration is invalid
        """
        self.config = config or CheckerConfig.from_env()
        errors = self.config.validate()
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

        self._owns_client = client is None
        self.client = client or PwnedPasswordsClient(config=self.config)
        self.evaluator = evaluator or ZxcvbnEvaluator()

        self._state = PipelineState()
        self._listeners: list[StateListener] = []
        self._tasks: list[asyncio.Task] = []
        self._debouncer: Debouncer[str] = Debouncer(self.settle, delay=self.config.debounce_seconds)

    @property
    def state(self) -> PipelineState:
        """Current immutable snapshot."""
        return self._state

    @property
    def generation(self) -> int:
        """Id of the current generation."""
        return self._state.generation

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state-change listener.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # Input
    # =========================================================================

    def on_input(self, value: str) -> None:
        """Feed a raw input change; settles after the debounce delay."""
        self._debouncer.push(value)

    def settle(self, value: str) -> None:
        """Start a new generation for a settled value.

        Must be called from a running event loop.
        """
        self._cancel_tasks()
        generation = self._state.generation + 1

        if not value:
            logger.debug(f"Generation {generation}: input cleared")
            self._set_state(PipelineState(generation=generation))
            return

        logger.debug(f"Generation {generation}: evaluating")
        self._set_state(PipelineState(
            generation=generation,
            phase=Phase.EVALUATING,
            candidate=value,
        ))

        self._tasks = [
            asyncio.create_task(self._run_strength(generation, value)),
            asyncio.create_task(self._run_lookup(generation, value)),
        ]

    def refresh(self) -> None:
        """Re-check the current candidate in a new generation."""
        if self._state.candidate:
            self.settle(self._state.candidate)

    async def wait(self) -> PipelineState:
        """Wait for the current generation's work to finish."""
        tasks = list(self._tasks)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        return self._state

    # =========================================================================
    # Per-generation work
    # =========================================================================

    async def _run_strength(self, generation: int, password: str) -> None:
        try:
            verdict = await evaluate_strength(self.evaluator, password)
        except StrengthEvaluationError as e:
            self._apply(generation, strength_error=str(e), strength_done=True)
            return
        self._apply(generation, strength=verdict, strength_done=True)

    async def _run_lookup(self, generation: int, password: str) -> None:
        try:
            pair = hash_password(password)
        except HashingError as e:
            logger.error(f"Generation {generation}: hashing failed")
            self._apply(generation, breach=BreachVerdict.failed(str(e)), breach_done=True)
            return

        try:
            verdict = await self.client.lookup(pair)
        except RemoteLookupError as e:
            logger.warning(f"Generation {generation}: breach lookup failed: {e}")
            verdict = BreachVerdict.failed(str(e))
        except Exception as e:
            logger.exception(f"Generation {generation}: breach lookup raised unexpectedly")
            verdict = BreachVerdict.failed(f"Breach lookup failed ({type(e).__name__})")
        self._apply(generation, breach=verdict, breach_done=True)

    # =========================================================================
    # State transitions
    # =========================================================================

    def _apply(self, generation: int, **changes) -> bool:
        """Merge one completion into the state of its generation.

        Returns:
            False if the generation is stale and the result was dropped
        """
        if generation != self._state.generation:
            logger.debug(f"Dropping stale result of generation {generation}")
            return False

        state = dataclasses.replace(self._state, **changes)
        if state.strength_done and state.breach_done:
            if state.breach.status == BreachStatus.LOOKUP_FAILED:
                phase = Phase.RESOLVED_WITH_LOOKUP_ERROR
            else:
                phase = Phase.RESOLVED
            state = dataclasses.replace(state, phase=phase)
            logger.debug(f"Generation {generation}: {phase.value}")

        self._set_state(state)
        return True

    def _set_state(self, state: PipelineState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener failed")

    def _cancel_tasks(self) -> None:
        for task in self._tasks:
            if not task.done():
                task.cancel()
        self._tasks = []

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def close(self) -> None:
        """Stop pending work and release the HTTP session."""
        self._debouncer.cancel()
        tasks = self._tasks
        self._cancel_tasks()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        if self._owns_client:
            await self.client.close()

    async def __aenter__(self) -> "VerdictCoordinator":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
