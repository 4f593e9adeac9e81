"""
Resource page controller.

A ResourcePage holds everything one list/detail page shows: the loaded items
and aggregate stats, the search term and filters, and the create/edit dialog
drafts. Application shells render its `state` and call its operations.

Every operation catches API failures at its own boundary and turns them into
state and toasts, so callers never see ApiError.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_snake

from console.auth import AUTH_REQUIRED_MESSAGE, PermissionChecker, SessionContext
from console.models import DraftForm
from console.resources.api import ResourceAPI
from console.resources.filters import ALL, filter_items
from console.resources.registry import InsertPosition, ResourceSpec
from console.utils import Toaster
from shared.api_client import ApiError

logger = logging.getLogger(__name__)

# Failures handled at operation boundaries; anything else is a bug and propagates
HANDLED_ERRORS = (ApiError, httpx.HTTPError, ValidationError)

DELETE_CONFIRMATION = 'Are you sure you want to delete "{name}"? This action cannot be undone.'

ACTION_PAST_TENSE = {"approve": "approved", "process": "processed"}

ConfirmCallback = Callable[[str], bool | Awaitable[bool]]


@dataclass
class DialogState:
    open: bool = False
    draft: DraftForm | None = None
    field_errors: dict[str, str] = field(default_factory=dict)
    submitting: bool = False
    selected_id: str | None = None


@dataclass
class PageState:
    items: list[Any] = field(default_factory=list)
    stats: BaseModel | None = None
    loading: bool = False
    error: str | None = None
    last_updated: datetime | None = None
    search_term: str = ""
    filters: dict[str, str] = field(default_factory=dict)
    create_dialog: DialogState = field(default_factory=DialogState)
    edit_dialog: DialogState = field(default_factory=DialogState)
    selected_id: str | None = None


def _is_not_found(error: Exception) -> bool:
    return isinstance(error, ApiError) and error.status_code == 404


class ResourcePage:
    """
    Controller for one resource's list/detail page.

    Args:
        spec: Resource descriptor (routes, models, validator, filters)
        api: CRUD client for the resource
        session: Session context providing the bearer token and claims
        toaster: Toast surface for user feedback
        confirm: Callback asked before destructive actions; may be async.
            Without one, deletes are never confirmed.
    """

    def __init__(
        self,
        spec: ResourceSpec,
        api: ResourceAPI,
        session: SessionContext,
        toaster: Toaster,
        confirm: ConfirmCallback | None = None,
    ):
        self.spec = spec
        self.api = api
        self.session = session
        self.toaster = toaster
        self.confirm = confirm

        self.state = PageState(
            stats=spec.stats_model(),
            filters={name: ALL for name in spec.filters},
        )

        self._generation = 0
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    # =========================================================================
    # Loading
    # =========================================================================

    async def load(self) -> None:
        """
        Fetch the list and the stats for this page.

        Only the reply to the most recent call is applied. A failed list keeps
        the previously loaded items on screen; a failed stats fetch keeps the
        previous stats.
        """
        if self._closed:
            return

        self._generation += 1
        generation = self._generation
        log_extra = {"resource": self.spec.name, "generation": generation}

        if await self.session.get_valid_token() is None:
            logger.info(f"Not loading {self.spec.name}: no session", extra=log_extra)
            self.state.error = AUTH_REQUIRED_MESSAGE
            self.state.loading = False
            return

        self.state.loading = True
        self.state.error = None

        task = asyncio.ensure_future(
            asyncio.gather(self.api.list(), self.api.stats(), return_exceptions=True)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        try:
            items_result, stats_result = await task
        except asyncio.CancelledError:
            if self._closed:
                logger.debug(f"Load of {self.spec.name} cancelled on close", extra=log_extra)
                return
            raise

        if self._closed or generation != self._generation:
            logger.debug(f"Discarding stale {self.spec.name} reply", extra=log_extra)
            return

        for result in (items_result, stats_result):
            if isinstance(result, BaseException) and not isinstance(result, HANDLED_ERRORS):
                self.state.loading = False
                raise result

        if isinstance(items_result, BaseException):
            message = self._error_message(items_result, f"Failed to load {self.spec.name}")
            logger.error(f"Failed to load {self.spec.name}: {items_result}", extra=log_extra)
            self.state.error = message
            self.toaster.error(message)
        else:
            self.state.items = list(items_result)
            self.state.last_updated = datetime.now(UTC)

        if isinstance(stats_result, BaseException):
            logger.warning(
                f"Failed to load {self.spec.name} stats: {stats_result}",
                extra=log_extra,
            )
        else:
            self.state.stats = stats_result

        self.state.loading = False

    # =========================================================================
    # Search, filters and dialogs
    # =========================================================================

    def filtered_items(self) -> list[Any]:
        return filter_items(
            self.state.items,
            self.state.search_term,
            self.state.filters,
            search_fields=self.spec.search_fields,
            matchers=self.spec.matchers,
        )

    def set_search(self, term: str) -> None:
        self.state.search_term = term

    def set_filter(self, name: str, value: str) -> None:
        if name not in self.state.filters:
            raise KeyError(f"{self.spec.name} has no filter {name!r}")
        self.state.filters[name] = value

    def open_create(self) -> DraftForm:
        self.state.create_dialog = DialogState(open=True, draft=self.spec.form())
        return self.state.create_dialog.draft

    def open_edit(self, item_id: str) -> DraftForm | None:
        item = self._find(item_id)
        if item is None:
            self.toaster.error(f"{self.spec.label} not found")
            return None

        self.state.selected_id = item_id
        self.state.edit_dialog = DialogState(
            open=True,
            draft=self.spec.form.from_item(item),
            selected_id=item_id,
        )
        return self.state.edit_dialog.draft

    def close_dialogs(self) -> None:
        self.state.create_dialog = DialogState()
        self.state.edit_dialog = DialogState()
        self.state.selected_id = None

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create(self, draft: DraftForm | None = None) -> BaseModel | None:
        """
        Validate and submit the create draft.

        Returns:
            The created entity, or None when nothing was created
        """
        dialog = self.state.create_dialog
        if dialog.submitting:
            logger.info(f"Ignoring duplicate {self.spec.name} create while one is in flight")
            return None

        draft = draft or dialog.draft or self.spec.form()
        dialog.draft = draft
        if not self._validate(dialog, draft, creating=True):
            return None

        dialog.submitting = True
        try:
            if not await self._require_auth():
                return None
            created = await self.api.create(draft.to_payload(creating=True))
        except HANDLED_ERRORS as e:
            logger.error(f"Failed to create {self.spec.label_lower}: {e}", extra={"resource": self.spec.name})
            self._report_mutation_error(dialog, e, f"Failed to create {self.spec.label_lower}")
            return None
        finally:
            dialog.submitting = False

        if created is not None:
            self._insert(created)
        self.state.create_dialog = DialogState()
        self.toaster.success(f"{self.spec.label} created successfully!")
        await self.load()
        return created

    async def update(
        self,
        item_id: str | None = None,
        draft: DraftForm | None = None,
    ) -> BaseModel | None:
        """
        Validate and submit the edit draft for an item.

        The server's reply replaces the local item as is. A 404 means the item
        is gone: the selection is dropped and the list refetched.
        """
        dialog = self.state.edit_dialog
        item_id = item_id or dialog.selected_id
        if item_id is None:
            raise ValueError("No item selected for update")

        if dialog.submitting:
            logger.info(f"Ignoring duplicate {self.spec.name} update while one is in flight")
            return None

        draft = draft or dialog.draft or self.spec.form()
        dialog.draft = draft
        if not self._validate(dialog, draft, creating=False):
            return None

        dialog.submitting = True
        try:
            if not await self._require_auth():
                return None
            updated = await self.api.update(item_id, draft.to_payload(creating=False))
        except HANDLED_ERRORS as e:
            logger.error(f"Failed to update {self.spec.label_lower} {item_id}: {e}", extra={"resource": self.spec.name})
            if _is_not_found(e):
                await self._drop_stale(item_id)
            else:
                self._report_mutation_error(dialog, e, f"Failed to update {self.spec.label_lower}")
            return None
        finally:
            dialog.submitting = False

        if updated is not None:
            self._replace(updated)
        self.state.edit_dialog = DialogState()
        self.state.selected_id = None
        self.toaster.success(f"{self.spec.label} updated successfully!")
        await self.load()
        return updated

    async def delete(self, item_id: str) -> bool:
        """
        Delete an item after confirmation.

        Returns:
            True if the item was deleted
        """
        item = self._find(item_id)
        name = getattr(item, "display_name", None) or item_id
        if not await self._confirm(DELETE_CONFIRMATION.format(name=name)):
            logger.debug(f"Delete of {self.spec.label_lower} {item_id} not confirmed")
            return False

        if not await self._require_auth():
            return False

        try:
            await self.api.delete(item_id)
        except HANDLED_ERRORS as e:
            logger.error(f"Failed to delete {self.spec.label_lower} {item_id}: {e}", extra={"resource": self.spec.name})
            if _is_not_found(e):
                await self._drop_stale(item_id)
            else:
                self.toaster.error(self._error_message(e, f"Failed to delete {self.spec.label_lower}"))
            return False

        self._remove(item_id)
        if self.state.selected_id == item_id:
            self.state.selected_id = None
            self.state.edit_dialog = DialogState()
        self.toaster.success(f"{self.spec.label} deleted successfully!")
        await self.load()
        return True

    async def run_action(self, item_id: str, name: str) -> BaseModel | None:
        """Run a named server action on an item (e.g. approve a refund)."""
        if not await self._require_auth():
            return None

        try:
            updated = await self.api.action(item_id, name)
        except HANDLED_ERRORS as e:
            logger.error(f"Failed to {name} {self.spec.label_lower} {item_id}: {e}", extra={"resource": self.spec.name})
            if _is_not_found(e):
                await self._drop_stale(item_id)
            else:
                self.toaster.error(self._error_message(e, f"Failed to {name} {self.spec.label_lower}"))
            return None

        if updated is not None:
            self._replace(updated)
        self.toaster.success(f"{self.spec.label} {ACTION_PAST_TENSE.get(name, name)} successfully!")
        await self.load()
        return updated

    # =========================================================================
    # Permissions and lifecycle
    # =========================================================================

    async def can(self, action: str) -> bool:
        """Display gate for an affordance: read, create, update, delete or manage."""
        checker = PermissionChecker(await self.session.get_claims())
        resource = self.spec.permission
        if action == "create":
            return checker.can_write(resource)
        if action == "update":
            return checker.can_update(resource)
        return checker.can(resource, action)

    async def close(self) -> None:
        """Unmount the page; in-flight loads are cancelled and never applied."""
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.debug(f"{self.spec.name} page closed")

    # =========================================================================
    # Internals
    # =========================================================================

    def _find(self, item_id: str) -> Any | None:
        return next((item for item in self.state.items if item.id == item_id), None)

    def _insert(self, item: Any) -> None:
        items = [existing for existing in self.state.items if existing.id != item.id]
        if self.spec.insert_position == InsertPosition.END:
            items.append(item)
        else:
            items.insert(0, item)
        self.state.items = items

    def _replace(self, item: Any) -> None:
        self.state.items = [item if existing.id == item.id else existing for existing in self.state.items]

    def _remove(self, item_id: str) -> None:
        self.state.items = [item for item in self.state.items if item.id != item_id]

    async def _drop_stale(self, item_id: str) -> None:
        """Handle an item the server no longer has."""
        self.toaster.error(f"{self.spec.label} no longer exists. The list has been refreshed.")
        self._remove(item_id)
        if self.state.selected_id == item_id:
            self.state.selected_id = None
        if self.state.edit_dialog.selected_id == item_id:
            self.state.edit_dialog = DialogState()
        await self.load()

    def _validate(self, dialog: DialogState, draft: DraftForm, creating: bool) -> bool:
        errors = self.spec.validator(draft, creating)
        if errors:
            first = errors[0]
            dialog.field_errors = {first.field: first.message}
            self.toaster.error(first.message)
            return False
        dialog.field_errors = {}
        return True

    async def _require_auth(self) -> bool:
        if await self.session.get_valid_token() is None:
            self.state.error = AUTH_REQUIRED_MESSAGE
            self.toaster.error(AUTH_REQUIRED_MESSAGE)
            return False
        return True

    async def _confirm(self, message: str) -> bool:
        if self.confirm is None:
            return False
        answer = self.confirm(message)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    def _report_mutation_error(self, dialog: DialogState, error: Exception, fallback: str) -> None:
        if isinstance(error, ApiError) and error.details:
            dialog.field_errors = {to_snake(d.field): d.message for d in error.details}
            self.toaster.error(", ".join(f"{d.field}: {d.message}" for d in error.details))
            return

        if isinstance(error, ApiError) and error.code in self.spec.error_code_fields:
            field_name, message = self.spec.error_code_fields[error.code]
            dialog.field_errors = {field_name: message}
            self.toaster.error(message)
            return

        self.toaster.error(self._error_message(error, fallback))

    @staticmethod
    def _error_message(error: BaseException, fallback: str) -> str:
        if isinstance(error, ApiError) and error.message:
            return error.message
        return fallback
