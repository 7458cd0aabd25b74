"""Messaging channel.

Append-only chat scoped to one case. Only the finder and the claimant
post; admins read. Posting is allowed while the case is PENDING, REJECTED
or DISPUTED and refused once it is VERIFIED or RESOLVED.

Appends swap the CHAT projection, which the store applies to the current
case under its lock. Concurrent appends all land, in the order the store
accepts them, and an append never conflicts with a concurrent decision or
dispute. A decision that freezes the channel before the append is applied
turns the append into ChannelFrozenError.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from uuid import UUID

from reunite.application.services.case_workflow_service import CaseWorkflowService
from reunite.domain.errors.case import ChannelFrozenError, InvalidMessageError
from reunite.domain.models.identity import CallerIdentity, CaseRole
from reunite.domain.models.verification_case import ChatMessage, VerificationCase
from reunite.domain.services.case_versioning import CaseProjection


@dataclass(frozen=True)
class MessagePage:
    """A slice of a case's chat history.

    Attributes:
        messages: Entries in accepted order.
        total: Total number of entries in the chat.
        offset: Index of the first returned entry.
        limit: Requested page size.
    """

    messages: tuple[ChatMessage, ...]
    total: int
    offset: int
    limit: int


def _append(
    current: VerificationCase, role: CaseRole, body: str, sent_at: datetime
) -> VerificationCase:
    if not current.status.is_chat_open():
        raise ChannelFrozenError(current.id, current.status)
    sender = current.finder if role == CaseRole.FINDER else current.claimant
    message = ChatMessage(sender_role=role, sender=sender, body=body, sent_at=sent_at)
    return replace(current, chat_history=current.chat_history + (message,))


class MessagingService(CaseWorkflowService):
    """Posts and pages chat messages on a case."""

    def _validate_body(self, case_id: UUID, body: str) -> str:
        text = (body or "").strip()
        if not text:
            raise InvalidMessageError(case_id, "Message body must not be empty")
        if len(text) > self._config.max_message_length:
            raise InvalidMessageError(
                case_id,
                f"Message exceeds {self._config.max_message_length} characters",
            )
        return text

    async def post_message(
        self,
        case_id: UUID,
        caller: CallerIdentity,
        body: str,
    ) -> VerificationCase:
        """Append a message to the case chat.

        Returns:
            The case after the append.

        Raises:
            UnauthorizedError: If the caller is not the finder or claimant.
            ChannelFrozenError: If the case is VERIFIED or RESOLVED, also
                when it froze between the read and the append.
            InvalidMessageError: If the body is empty or too long.
            CaseNotFoundError: If the case does not exist.
        """
        log = self._log_operation("post_message", case_id=case_id)
        case = await self._store.get(case_id)
        role = self._resolver.require_party(caller, case, "post message")
        if not case.status.is_chat_open():
            raise ChannelFrozenError(case.id, case.status)
        text = self._validate_body(case.id, body)

        sent_at = self._time.now()
        try:
            updated = await self._store.compare_and_swap(
                case.id,
                case.version,
                lambda current: _append(current, role, text, sent_at),
                CaseProjection.CHAT,
            )
        except ChannelFrozenError as e:
            log.info("post_message_channel_frozen", status=e.status.value)
            raise

        if self._metrics is not None:
            self._metrics.record_message()
        log.info(
            "message_posted",
            sender_role=role.value,
            position=len(updated.chat_history) - 1,
            version=updated.version,
        )
        return updated

    async def get_messages(
        self,
        case_id: UUID,
        caller: CallerIdentity,
        offset: int = 0,
        limit: int | None = None,
    ) -> MessagePage:
        """Read a page of the chat, in accepted order.

        Parties and admins may read, including after the channel froze.

        Raises:
            UnauthorizedError: If the caller may not read the case.
            CaseNotFoundError: If the case does not exist.
            ValueError: If offset is negative or limit is not positive.
        """
        if offset < 0:
            raise ValueError(f"offset must be non-negative, got {offset}")
        page_size = self._config.max_page_size if limit is None else limit
        if page_size < 1:
            raise ValueError(f"limit must be positive, got {page_size}")
        page_size = min(page_size, self._config.max_page_size)

        case = await self._store.get(case_id)
        self._resolver.require_reader(caller, case, "read messages")
        history = case.chat_history
        return MessagePage(
            messages=history[offset : offset + page_size],
            total=len(history),
            offset=offset,
            limit=page_size,
        )
