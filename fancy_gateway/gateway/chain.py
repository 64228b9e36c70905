"""Provider chain: ordered fallthrough across providers.

A run is a small state machine:

    Pending(0) ──success──▶ Succeeded
        │
      failure
        ▼
    Pending(1) ── ... ──▶ Pending(last) ──failure──▶ ExhaustedFailed

Every failure kind advances to the next provider; none stops the chain early.
On exhaustion the outcome carries the *primary* provider's reason.

Attempts run strictly one after another. Racing providers would spend quota
on lower-priority providers even when the primary would have answered.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from fancy_gateway.core.metrics import CHAIN_OUTCOMES, PROVIDER_ATTEMPTS
from fancy_gateway.gateway.provider_adapters import BaseProviderAdapter, get_adapter
from fancy_gateway.gateway.types import (
    AttemptFailure,
    AttemptResult,
    AttemptSuccess,
    FailureKind,
    GatewayFailure,
    GatewayOutcome,
    GatewaySuccess,
    ProviderSpec,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Pending:
    index: int
    failures: tuple[AttemptFailure, ...] = ()


@dataclass(frozen=True)
class Succeeded:
    result: AttemptSuccess


@dataclass(frozen=True)
class ExhaustedFailed:
    primary: AttemptFailure
    failures: tuple[AttemptFailure, ...]


ChainState = Pending | Succeeded | ExhaustedFailed


def advance(state: Pending, result: AttemptResult, chain_length: int) -> ChainState:
    """Apply one attempt's result to a pending state."""
    if isinstance(result, AttemptSuccess):
        return Succeeded(result)

    failures = state.failures + (result,)
    if state.index + 1 < chain_length:
        return Pending(state.index + 1, failures)
    return ExhaustedFailed(primary=failures[0], failures=failures)


# ---------------------------------------------------------------------------
# Chain
# ---------------------------------------------------------------------------


class ProviderChain:
    """Fixed, ordered list of adapters for one request category."""

    def __init__(self, name: str, adapters: Sequence[BaseProviderAdapter]):
        if not adapters:
            raise ValueError(f"Provider chain '{name}' needs at least one provider")
        self.name = name
        self.adapters: tuple[BaseProviderAdapter, ...] = tuple(adapters)

    @classmethod
    def from_specs(cls, name: str, specs: Sequence[ProviderSpec]) -> ProviderChain:
        return cls(name, [get_adapter(spec) for spec in specs])

    @property
    def specs(self) -> tuple[ProviderSpec, ...]:
        return tuple(adapter.spec for adapter in self.adapters)

    async def run(self, prompt: str, **options: Any) -> GatewayOutcome:
        """Try each provider in order until one succeeds."""
        state: ChainState = Pending(0)

        while isinstance(state, Pending):
            adapter = self.adapters[state.index]
            result = await self._attempt(adapter, prompt, options)
            self._record(adapter, result, is_last=state.index == len(self.adapters) - 1)
            state = advance(state, result, len(self.adapters))

        if isinstance(state, Succeeded):
            CHAIN_OUTCOMES.labels(chain=self.name, outcome="success").inc()
            return GatewaySuccess(
                payload=state.result.payload,
                provider=state.result.provider,
                model=state.result.model,
            )

        CHAIN_OUTCOMES.labels(chain=self.name, outcome="exhausted").inc()
        logger.error(
            "All %d %s providers failed; primary error: %s",
            len(state.failures),
            self.name,
            state.primary.reason,
            extra={"chain": self.name},
        )
        return GatewayFailure(primary_reason=state.primary.reason, attempts=state.failures)

    async def _attempt(self, adapter: BaseProviderAdapter, prompt: str, options: dict[str, Any]) -> AttemptResult:
        timeout = adapter.spec.timeout_seconds
        try:
            return await asyncio.wait_for(adapter.attempt(prompt, **options), timeout=timeout)
        except asyncio.TimeoutError:
            return AttemptFailure(
                provider=adapter.provider,
                kind=FailureKind.TRANSPORT_FAILURE,
                reason=f"{adapter.label} timeout after {timeout:g}s",
            )
        except Exception as e:
            # Adapters report failures as values; an escaping exception still fails only this provider
            logger.exception("Unexpected error from %s provider %s", self.name, adapter.provider.value)
            return AttemptFailure(
                provider=adapter.provider,
                kind=FailureKind.TRANSPORT_FAILURE,
                reason=f"{adapter.label} failed: {type(e).__name__}: {e}",
            )

    def _record(self, adapter: BaseProviderAdapter, result: AttemptResult, is_last: bool) -> None:
        provider = adapter.provider.value
        extra = {"chain": self.name, "provider": provider}

        if isinstance(result, AttemptSuccess):
            PROVIDER_ATTEMPTS.labels(chain=self.name, provider=provider, outcome="success").inc()
            logger.info("%s answered by %s (%s)", self.name, provider, result.model, extra=extra)
            return

        PROVIDER_ATTEMPTS.labels(chain=self.name, provider=provider, outcome=result.kind.value).inc()
        logger.warning(
            "%s provider %s failed [%s]: %s%s",
            self.name,
            provider,
            result.kind.value,
            result.reason,
            "" if is_last else ", trying next provider",
            extra=extra,
        )
        if result.raw_detail:
            logger.debug("%s provider %s raw detail: %s", self.name, provider, result.raw_detail, extra=extra)
