from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from loguru import logger

from access_inspector.adapters.base import ScanSource
from access_inspector.domain.models import (
    AccessMode,
    InspectorView,
    NormalizedUserRecord,
    PageSizeOption,
    PaginationRead,
    ScanOverview,
    ScanResponse,
    ToggleOption,
    UserScope,
    empty_scan_response,
)
from access_inspector.domain.permissions import (
    ACCESS_MODE_LABELS,
    DEFAULT_PAGE_SIZE,
    PAGE_SIZE_OPTIONS,
    USER_SCOPE_LABELS,
    coerce_page_size,
)
from access_inspector.domain.state_machine import FetchPhase, UiState, can_transition
from access_inspector.services.error_messages import join_error_messages
from access_inspector.services.filtering import filter_users
from access_inspector.services.normalizer import coerce_scan_response, normalize_users
from access_inspector.services.pagination import Page, paginate

FetchParams = tuple[str | None, AccessMode]


class InspectorError(Exception):
    pass


class InvalidTransitionError(InspectorError):
    pass


@dataclass
class ViewState:
    access_mode: AccessMode = AccessMode.READ
    user_scope: UserScope = UserScope.ALL
    search_term: str = ""
    page_size: int = DEFAULT_PAGE_SIZE
    current_page: int = 1
    record_id: str | None = None
    response: ScanResponse = field(default_factory=empty_scan_response)
    error_message: str | None = None
    phase: FetchPhase = FetchPhase.NO_CONTEXT

    @property
    def is_loading(self) -> bool:
        return self.phase == FetchPhase.LOADING

    @property
    def fetch_params(self) -> FetchParams:
        return (self.record_id, self.access_mode)


def _toggle_class(base: str, active: bool) -> str:
    return f"{base} {base}--active" if active else base


class InspectorController:
    def __init__(
        self,
        source: ScanSource,
        *,
        access_mode: AccessMode | str = AccessMode.READ,
        page_size: Any = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._source = source
        self._fetch_sequence = 0
        self._state = ViewState(
            access_mode=AccessMode(access_mode),
            page_size=coerce_page_size(page_size),
        )

    @property
    def state(self) -> ViewState:
        return replace(self._state)

    def _transition(self, target: FetchPhase) -> None:
        if not can_transition(self._state.phase, target):
            raise InvalidTransitionError(f"cannot move from {self._state.phase} to {target}")
        self._state.phase = target

    # fetch parameters

    async def set_record_id(self, record_id: str | None) -> None:
        next_record_id = record_id or None
        if next_record_id is None:
            self._lose_context()
            return
        if next_record_id == self._state.record_id:
            return
        self._state.record_id = next_record_id
        await self._fetch()

    async def select_mode(self, mode: AccessMode | str | None) -> None:
        try:
            next_mode = AccessMode(mode)
        except ValueError:
            logger.debug("ignoring unknown access mode {!r}", mode)
            return
        if next_mode == self._state.access_mode:
            return
        self._state.access_mode = next_mode
        self._state.current_page = 1
        if self._state.record_id is None:
            return
        await self._fetch()

    async def refresh(self) -> None:
        if self._state.record_id is None:
            return
        await self._fetch()

    def _lose_context(self) -> None:
        self._transition(FetchPhase.NO_CONTEXT)
        self._state.record_id = None
        self._state.response = empty_scan_response()
        self._state.error_message = None

    def _is_current(self, sequence: int, params: FetchParams) -> bool:
        # A newer fetch for the same parameters also supersedes this one.
        return sequence == self._fetch_sequence and params == self._state.fetch_params

    async def _fetch(self) -> None:
        params = self._state.fetch_params
        record_id, mode = params
        if record_id is None:
            return
        self._fetch_sequence += 1
        sequence = self._fetch_sequence
        self._transition(FetchPhase.LOADING)
        logger.debug("fetching record access record={} mode={}", record_id, mode)
        try:
            payload = await self._source.fetch_record_access(record_id, mode.value)
        except Exception as exc:
            if not self._is_current(sequence, params):
                logger.debug("discarding stale failure for record={} mode={}", record_id, mode)
                return
            self._apply_failure(exc)
            return
        if not self._is_current(sequence, params):
            logger.debug("discarding stale result for record={} mode={}", record_id, mode)
            return
        self._apply_success(payload)

    def _apply_success(self, payload: Any) -> None:
        self._state.response = coerce_scan_response(payload)
        self._state.error_message = None
        self._state.current_page = 1
        self._transition(FetchPhase.LOADED)
        logger.debug(
            "loaded {} users for record={}",
            len(self._state.response.users),
            self._state.record_id,
        )

    def _apply_failure(self, error: Exception) -> None:
        self._state.response = empty_scan_response()
        self._state.error_message = join_error_messages(error)
        self._state.current_page = 1
        self._transition(FetchPhase.FAILED)
        logger.warning(
            "record access fetch failed for record={}: {}",
            self._state.record_id,
            self._state.error_message,
        )

    # filter and page state

    def set_user_scope(self, scope: UserScope | str) -> None:
        try:
            self._state.user_scope = UserScope(scope)
        except ValueError:
            logger.debug("ignoring unknown user scope {!r}", scope)
            return
        self._state.current_page = 1

    def set_search_term(self, search_term: str | None) -> None:
        self._state.search_term = search_term or ""
        self._state.current_page = 1

    def set_page_size(self, page_size: Any) -> None:
        self._state.page_size = coerce_page_size(page_size)
        self._state.current_page = 1

    def next_page(self) -> bool:
        page = self.page()
        if not page.can_go_next:
            return False
        self._state.current_page = page.effective_page + 1
        return True

    def previous_page(self) -> bool:
        page = self.page()
        if not page.can_go_previous:
            return False
        self._state.current_page = page.effective_page - 1
        return True

    def go_to_page(self, page_number: int) -> None:
        # paginate clamps anything past the last page
        self._state.current_page = max(1, page_number)

    # derived views

    @property
    def has_record_context(self) -> bool:
        return self._state.record_id is not None

    @property
    def has_users(self) -> bool:
        return len(self._state.response.users) > 0

    @property
    def notes(self) -> tuple[str, ...]:
        return self._state.response.notes

    @property
    def access_mode_label(self) -> str:
        return ACCESS_MODE_LABELS[self._state.access_mode]

    @property
    def selected_count_label(self) -> str:
        count = self._state.response.users_with_access
        return f"{count} users with {self.access_mode_label.lower()} access"

    def normalized_users(self) -> tuple[NormalizedUserRecord, ...]:
        return normalize_users(self._state.response.users)

    def filtered_users(self) -> tuple[NormalizedUserRecord, ...]:
        if not self.has_users:
            return ()
        return filter_users(
            self.normalized_users(),
            self._state.user_scope,
            self._state.search_term,
        )

    def page(self) -> Page[NormalizedUserRecord]:
        return paginate(self.filtered_users(), self._state.page_size, self._state.current_page)

    def mode_options(self) -> tuple[ToggleOption, ...]:
        return tuple(
            ToggleOption(
                value=mode.value,
                label=label,
                active=mode == self._state.access_mode,
                class_name=_toggle_class("mode-button", mode == self._state.access_mode),
            )
            for mode, label in ACCESS_MODE_LABELS.items()
        )

    def scope_options(self) -> tuple[ToggleOption, ...]:
        return tuple(
            ToggleOption(
                value=scope.value,
                label=label,
                active=scope == self._state.user_scope,
                class_name=_toggle_class("scope-button", scope == self._state.user_scope),
            )
            for scope, label in USER_SCOPE_LABELS.items()
        )

    def page_size_options(self) -> tuple[PageSizeOption, ...]:
        return tuple(PageSizeOption(label=f"{size} per page", value=str(size)) for size in PAGE_SIZE_OPTIONS)

    def ui_state(self) -> UiState:
        if self._state.is_loading:
            return UiState.LOADING
        if self._state.error_message:
            return UiState.ERROR
        if not self.has_record_context or not self.has_users:
            return UiState.EMPTY
        return UiState.CONTENT

    def view(self) -> InspectorView:
        state = self._state
        page = self.page()
        settled = not state.is_loading and not state.error_message
        return InspectorView(
            record_id=state.record_id,
            ui_state=self.ui_state(),
            is_loading=state.is_loading,
            error_message=state.error_message,
            access_mode=state.access_mode,
            access_mode_label=self.access_mode_label,
            user_scope=state.user_scope,
            search_term=state.search_term,
            mode_options=self.mode_options(),
            scope_options=self.scope_options(),
            page_size_options=self.page_size_options(),
            page_size_value=str(state.page_size),
            selected_count_label=self.selected_count_label,
            overview=ScanOverview.model_validate(
                state.response.model_dump(exclude={"notes", "users"}),
            ),
            notes=self.notes,
            users=page.items,
            pagination=PaginationRead(
                effective_page=page.effective_page,
                total_pages=page.total_pages,
                page_size=page.page_size,
                total_items=page.total_items,
                summary=page.summary,
                can_go_previous=page.can_go_previous,
                can_go_next=page.can_go_next,
            ),
            has_record_context=self.has_record_context,
            has_users=self.has_users,
            has_notes=len(self.notes) > 0,
            show_main_content=self.has_record_context and settled,
            show_users_grid=page.total_items > 0,
            show_empty_state=settled and self.has_record_context and not self.has_users,
            show_filter_empty_state=self.has_users and page.total_items == 0,
        )
