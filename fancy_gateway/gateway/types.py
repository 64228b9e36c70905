"""Core types for the completion gateway.

Everything here is created and discarded within a single inbound request,
except ProviderSpec, which is built once from settings at startup and only
ever read afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ProviderName(str, Enum):
    """Upstream providers known to the gateway."""

    GEMINI = "gemini"
    A4F_CHAT = "a4f"
    OPENROUTER_CHAT = "openrouter"
    OPENROUTER_IMAGE = "openrouter-image"
    A4F_IMAGE = "a4f-image"


class EndpointKind(str, Enum):
    """How an adapter reaches its provider."""

    SDK_CALL = "sdk-call"
    RAW_HTTP = "raw-http"


class FailureKind(str, Enum):
    """Why a provider attempt failed. The chain treats every kind the same."""

    MISSING_CREDENTIAL = "missing_credential"
    TRANSPORT_FAILURE = "transport_failure"  # network error or timeout
    UPSTREAM_REJECTED = "upstream_rejected"  # non-2xx status
    MALFORMED_UPSTREAM_BODY = "malformed_upstream_body"  # unparseable / schema mismatch
    EMPTY_OR_ABSENT_PAYLOAD = "empty_or_absent_payload"  # valid body, nothing usable in it


class ChatMode(str, Enum):
    PLAIN = "chat"
    CODE = "code"

    @classmethod
    def from_wire(cls, value: object) -> ChatMode:
        """Only the literal ``"code"`` selects the engineer persona."""
        return cls.CODE if value == cls.CODE.value else cls.PLAIN


# ---------------------------------------------------------------------------
# Provider configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProviderSpec:
    """Static description of one provider in a chain."""

    name: ProviderName
    kind: EndpointKind
    model: str
    credential_env: str  # env var the credential comes from, used in diagnostics
    api_key: str = field(default="", repr=False)
    base_url: str = ""
    timeout_seconds: float = 60.0
    extra_headers: tuple[tuple[str, str], ...] = ()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChatRequest:
    prompt: str
    mode: ChatMode = ChatMode.PLAIN


@dataclass(frozen=True)
class ImageRequest:
    prompt: str
    size: str | None = None


# ---------------------------------------------------------------------------
# Attempt results (one per provider try)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AttemptSuccess:
    provider: ProviderName
    model: str
    payload: str  # completion text or image reference


@dataclass(frozen=True)
class AttemptFailure:
    provider: ProviderName
    kind: FailureKind
    reason: str
    raw_detail: str = ""


AttemptResult = AttemptSuccess | AttemptFailure


# ---------------------------------------------------------------------------
# Gateway outcome (one per inbound request)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GatewaySuccess:
    payload: str
    provider: ProviderName
    model: str


@dataclass(frozen=True)
class GatewayFailure:
    """Every provider failed.

    ``primary_reason`` is the first provider's failure: it is the one that
    points at systemic problems such as a missing credential.
    """

    primary_reason: str
    attempts: tuple[AttemptFailure, ...] = ()
    attempts_exhausted: bool = True


GatewayOutcome = GatewaySuccess | GatewayFailure


# ---------------------------------------------------------------------------
# Adapter-internal error
# ---------------------------------------------------------------------------


class ProviderError(Exception):
    """Raised inside an adapter; converted to AttemptFailure at its boundary."""

    def __init__(self, kind: FailureKind, message: str, raw_detail: str = ""):
        super().__init__(message)
        self.kind = kind
        self.raw_detail = raw_detail
