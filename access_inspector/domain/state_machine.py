from __future__ import annotations

from enum import StrEnum


class FetchPhase(StrEnum):
    NO_CONTEXT = "NO_CONTEXT"
    LOADING = "LOADING"
    LOADED = "LOADED"
    FAILED = "FAILED"


ALLOWED_TRANSITIONS: dict[FetchPhase, set[FetchPhase]] = {
    FetchPhase.NO_CONTEXT: {FetchPhase.NO_CONTEXT, FetchPhase.LOADING},
    FetchPhase.LOADING: {
        FetchPhase.LOADING,
        FetchPhase.LOADED,
        FetchPhase.FAILED,
        FetchPhase.NO_CONTEXT,
    },
    FetchPhase.LOADED: {FetchPhase.LOADING, FetchPhase.NO_CONTEXT},
    FetchPhase.FAILED: {FetchPhase.LOADING, FetchPhase.NO_CONTEXT},
}


def can_transition(source: FetchPhase, target: FetchPhase) -> bool:
    return target in ALLOWED_TRANSITIONS.get(source, set())


class UiState(StrEnum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    CONTENT = "content"
