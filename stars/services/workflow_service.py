"""
Stage workflow service.

Every pipeline mutation goes through here: assign a candidate to a position,
move it between stages, comment on it, and record user logins. Each
operation validates first, then writes the entity and its audit entry, then
fans out notifications. Fan-out is best effort: its failures are logged and
never undo or fail the operation. Email jobs are queued only after all store
writes are done.
"""
import logging
import uuid
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Union

import asyncpg

from stars.config import LOGIN_NOTIFY_DEBOUNCE_SECONDS
from stars.exceptions import (
    DuplicateAssignmentError,
    InvalidStageError,
    NotFoundError,
    ValidationError,
    parse_uuid,
)
from stars.models import (
    ActivityAction,
    CandidatePositionResponse,
    CommentResponse,
    LoginResponse,
    NotificationType,
    Stage,
    UserRole,
)
from stars.repositories import PipelineStore
from stars.services.notification_fanout import Actor, NotificationEvent, NotificationFanout
from stars.utils import utc_now

logger = logging.getLogger(__name__)

IdLike = Union[str, uuid.UUID]


def parse_stage(value: Any) -> Stage:
    """Validate a stage value, raising InvalidStageError for anything unknown."""
    if isinstance(value, Stage):
        return value
    try:
        return Stage(value)
    except ValueError:
        raise InvalidStageError(value)


class StageWorkflowService:
    """Pipeline mutations with audit logging and notification fan-out."""

    def __init__(
        self,
        store: PipelineStore,
        email_queue,
        fanout: Optional[NotificationFanout] = None,
        now: Callable[[], datetime] = utc_now,
        login_debounce_seconds: int = LOGIN_NOTIFY_DEBOUNCE_SECONDS,
    ):
        self.store = store
        self.email_queue = email_queue
        self.now = now
        self.fanout = fanout or NotificationFanout(store, now=now)
        self.login_debounce_seconds = login_debounce_seconds

    # =========================================================================
    # Mutations
    # =========================================================================

    async def assign_candidate(
        self,
        candidate_id: IdLike,
        position_id: IdLike,
        acting_user_id: IdLike,
        acting_user_name: str,
    ) -> str:
        """
        Put a candidate into a position's pipeline at stage ``submitted``.

        Returns:
            The new candidate position ID

        Raises:
            NotFoundError: Candidate or position does not exist
            DuplicateAssignmentError: The candidate is already in this position
        """
        candidate_uuid = parse_uuid(candidate_id, "candidate_id")
        position_uuid = parse_uuid(position_id, "position_id")
        actor_uuid = parse_uuid(acting_user_id, "user_id")

        candidate = await self.store.candidates.get_by_id(candidate_uuid)
        if not candidate:
            raise NotFoundError("Candidate", str(candidate_uuid))

        position = await self.store.positions.get_by_id(position_uuid)
        if not position:
            raise NotFoundError("Position", str(position_uuid))

        if await self.store.candidate_positions.get_by_pair(position_uuid, candidate_uuid):
            raise DuplicateAssignmentError(str(candidate_uuid), str(position_uuid))

        now = self.now()
        try:
            cp = await self.store.candidate_positions.create(
                candidate_id=candidate_uuid,
                position_id=position_uuid,
                stage=Stage.SUBMITTED.value,
                at=now,
            )
        except asyncpg.UniqueViolationError:
            raise DuplicateAssignmentError(str(candidate_uuid), str(position_uuid))

        await self.store.activity_log.create(
            action=ActivityAction.ASSIGNED.value,
            user_id=actor_uuid,
            user_name=acting_user_name,
            candidate_position_id=cp["id"],
            at=now,
            to_stage=Stage.SUBMITTED.value,
        )
        logger.info(
            f"Assigned candidate {candidate_uuid} to position {position_uuid} "
            f"(candidate_position={cp['id']}) by {acting_user_name}"
        )

        async def build(actor: Actor) -> NotificationEvent:
            return await self._pipeline_event(
                NotificationType.CANDIDATE_ASSIGNED, actor, cp, now,
                candidate=candidate, position=position,
            )

        await self._notify(actor_uuid, acting_user_name, build)
        return str(cp["id"])

    async def change_stage(
        self,
        candidate_position_id: IdLike,
        new_stage: Any,
        acting_user_id: IdLike,
        acting_user_name: str,
    ) -> None:
        """
        Move a candidate position to ``new_stage``.

        Any stage may follow any other, including the current one; each call
        writes an audit entry and notifies. Concurrent changes: last write wins.

        Raises:
            InvalidStageError: ``new_stage`` is not a known stage
            NotFoundError: The candidate position does not exist
        """
        stage = parse_stage(new_stage)
        cp_uuid = parse_uuid(candidate_position_id, "candidate_position_id")
        actor_uuid = parse_uuid(acting_user_id, "user_id")

        cp = await self.store.candidate_positions.get_by_id(cp_uuid)
        if not cp:
            raise NotFoundError("CandidatePosition", str(cp_uuid))

        from_stage = cp["stage"]
        now = self.now()

        updated = await self.store.candidate_positions.update_stage(cp_uuid, stage.value, now)
        if not updated:
            raise NotFoundError("CandidatePosition", str(cp_uuid))

        await self.store.activity_log.create(
            action=ActivityAction.STAGE_CHANGE.value,
            user_id=actor_uuid,
            user_name=acting_user_name,
            candidate_position_id=cp_uuid,
            at=now,
            from_stage=from_stage,
            to_stage=stage.value,
        )
        logger.info(f"Candidate position {cp_uuid}: {from_stage} -> {stage.value} by {acting_user_name}")

        async def build(actor: Actor) -> NotificationEvent:
            return await self._pipeline_event(
                NotificationType.STAGE_CHANGE, actor, updated, now,
                from_stage=from_stage, to_stage=stage.value,
            )

        await self._notify(actor_uuid, acting_user_name, build)

    async def add_comment(
        self,
        body: str,
        candidate_position_id: IdLike,
        acting_user_id: IdLike,
        acting_user_name: str,
    ) -> str:
        """
        Comment on a candidate position. The stored body is trimmed.

        Returns:
            The new comment ID

        Raises:
            ValidationError: Body is empty after trimming
            NotFoundError: The candidate position does not exist
        """
        text = (body or "").strip()
        if not text:
            raise ValidationError("Comment body cannot be empty", field="body")

        cp_uuid = parse_uuid(candidate_position_id, "candidate_position_id")
        actor_uuid = parse_uuid(acting_user_id, "user_id")

        cp = await self.store.candidate_positions.get_by_id(cp_uuid)
        if not cp:
            raise NotFoundError("CandidatePosition", str(cp_uuid))

        now = self.now()
        comment = await self.store.comments.create(
            body=text,
            user_id=actor_uuid,
            candidate_position_id=cp_uuid,
            at=now,
        )
        await self.store.candidate_positions.touch(cp_uuid, now)
        await self.store.activity_log.create(
            action=ActivityAction.COMMENT.value,
            user_id=actor_uuid,
            user_name=acting_user_name,
            candidate_position_id=cp_uuid,
            at=now,
        )
        logger.info(f"Comment {comment['id']} on candidate position {cp_uuid} by {acting_user_name}")

        async def build(actor: Actor) -> NotificationEvent:
            return await self._pipeline_event(
                NotificationType.NEW_COMMENT, actor, cp, now,
                comment_body=text,
            )

        await self._notify(actor_uuid, acting_user_name, build)
        return str(comment["id"])

    async def record_login(self, user_id: IdLike) -> LoginResponse:
        """
        Stamp the user's last login and, for clients, tell the admins.

        Admins are notified only when the previous login is missing or older
        than the debounce window, so a client logging in repeatedly produces
        at most one notification per window. The previous value is read and
        replaced in one statement.

        Raises:
            NotFoundError: The user does not exist
        """
        user_uuid = parse_uuid(user_id, "user_id")
        now = self.now()

        user = await self.store.users.record_login(user_uuid, now)
        if not user:
            raise NotFoundError("User", str(user_uuid))

        previous = user["previous_login_at"]
        notified = False

        if user["role"] == UserRole.CLIENT.value and self.should_notify_login(previous, now):
            actor = Actor(id=user["id"], name=user["name"], role=UserRole.CLIENT)

            async def build(_: Actor) -> NotificationEvent:
                org = await self.store.organizations.get_by_id(user["org_id"]) if user["org_id"] else None
                return NotificationEvent(
                    type=NotificationType.CLIENT_LOGIN,
                    actor=actor,
                    org_id=user["org_id"],
                    org_name=org["name"] if org else None,
                    occurred_at=now,
                )

            notified = await self._notify(user_uuid, user["name"], build, actor=actor)

        logger.info(f"Recorded login for user {user_uuid} (admins notified: {notified})")
        return LoginResponse(user_id=str(user_uuid), notified_admins=notified)

    def should_notify_login(self, previous_login_at: Optional[datetime], now: datetime) -> bool:
        if previous_login_at is None:
            return True
        return (now - previous_login_at).total_seconds() > self.login_debounce_seconds

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_candidate_position(self, candidate_position_id: IdLike) -> CandidatePositionResponse:
        cp_uuid = parse_uuid(candidate_position_id, "candidate_position_id")
        row = await self.store.candidate_positions.get_by_id(cp_uuid)
        if not row:
            raise NotFoundError("CandidatePosition", str(cp_uuid))
        return self._cp_to_response(row)

    async def list_comments(self, candidate_position_id: IdLike) -> List[CommentResponse]:
        """Comments on a candidate position, newest first."""
        cp_uuid = parse_uuid(candidate_position_id, "candidate_position_id")
        rows = await self.store.comments.list_by_candidate_position(cp_uuid)
        return [
            CommentResponse(
                id=str(row["id"]),
                body=row["body"],
                user_id=str(row["user_id"]),
                user_name=row.get("user_name") or "Unknown",
                candidate_position_id=str(row["candidate_position_id"]),
                created_at=row["created_at"],
            )
            for row in rows
        ]

    async def list_by_position(self, position_id: IdLike) -> List[CandidatePositionResponse]:
        rows = await self.store.candidate_positions.list_by_position(parse_uuid(position_id, "position_id"))
        return [self._cp_to_response(row) for row in rows]

    async def list_by_candidate(self, candidate_id: IdLike) -> List[CandidatePositionResponse]:
        rows = await self.store.candidate_positions.list_by_candidate(parse_uuid(candidate_id, "candidate_id"))
        return [self._cp_to_response(row) for row in rows]

    async def list_by_stage(self, stage: Any) -> List[CandidatePositionResponse]:
        rows = await self.store.candidate_positions.list_by_stage(parse_stage(stage).value)
        return [self._cp_to_response(row) for row in rows]

    async def count_all(self) -> int:
        return await self.store.candidate_positions.count_all()

    @staticmethod
    def _cp_to_response(row) -> CandidatePositionResponse:
        return CandidatePositionResponse(
            id=str(row["id"]),
            candidate_id=str(row["candidate_id"]),
            position_id=str(row["position_id"]),
            stage=row["stage"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            last_interaction_at=row["last_interaction_at"],
            candidate_name=row.get("candidate_name"),
            position_title=row.get("position_title"),
        )

    # =========================================================================
    # Fan-out
    # =========================================================================

    async def _pipeline_event(
        self,
        event_type: NotificationType,
        actor: Actor,
        cp: Mapping[str, Any],
        now: datetime,
        candidate: Optional[Mapping[str, Any]] = None,
        position: Optional[Mapping[str, Any]] = None,
        **fields,
    ) -> NotificationEvent:
        """Load candidate, position and organization context for a pipeline event."""
        if candidate is None:
            candidate = await self.store.candidates.get_by_id(cp["candidate_id"])
        if position is None:
            position = await self.store.positions.get_by_id(cp["position_id"])
        org = await self.store.organizations.get_by_id(position["org_id"]) if position else None

        return NotificationEvent(
            type=event_type,
            actor=actor,
            candidate_position_id=cp["id"],
            candidate_id=cp["candidate_id"],
            candidate_name=candidate["full_name"] if candidate else None,
            candidate_current_role=candidate["current_role"] if candidate else None,
            position_id=cp["position_id"],
            position_title=position["title"] if position else None,
            org_id=position["org_id"] if position else None,
            org_name=org["name"] if org else None,
            occurred_at=now,
            **fields,
        )

    async def _notify(
        self,
        acting_user_id: uuid.UUID,
        acting_user_name: str,
        build_event: Callable[[Actor], Awaitable[NotificationEvent]],
        actor: Optional[Actor] = None,
    ) -> bool:
        """
        Run fan-out for an event and queue its emails. Never raises.

        Returns:
            True if at least one recipient was planned
        """
        try:
            if actor is None:
                actor_row = await self.store.users.get_by_id(acting_user_id)
                if not actor_row:
                    logger.warning(f"Acting user {acting_user_id} not found, skipping notifications")
                    return False
                actor = Actor(id=actor_row["id"], name=acting_user_name, role=UserRole(actor_row["role"]))

            event = await build_event(actor)
            result = await self.fanout.dispatch(event)
        except Exception as e:
            logger.error(f"Notification fan-out failed: {e}", exc_info=True)
            return False

        if result.email_jobs:
            try:
                self.email_queue.enqueue(result.email_jobs)
            except Exception as e:
                logger.error(f"Failed to queue {len(result.email_jobs)} email(s): {e}", exc_info=True)

        return bool(result.planned)
