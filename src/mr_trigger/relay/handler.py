import logging
from collections.abc import Awaitable, Callable
from contextlib import nullcontext
from dataclasses import dataclass, field
from functools import partial

from mr_trigger.config import Settings
from mr_trigger.exceptions import GitLabError
from mr_trigger.models.webhook import MergeRequestEvent
from mr_trigger.platforms.base import GitPlatform
from .branches import SourceBranchRemover
from .canceller import RedundantBuildCanceller
from .filter import EventFilter, Verdict
from .guard import IdempotencyGuard
from .locks import CommitLocks
from .pipeline import PipelineTrigger, pipeline_ref
from .tokens import TriggerTokenResolver


logger = logging.getLogger(__name__)

DeferredTask = Callable[[], Awaitable[None]]


@dataclass
class Outcome:
    """Terminal result of handling one webhook event."""
    status_code: int
    status: str
    message: str
    pipeline_id: int | None = None
    ref: str | None = None  # ref the pipeline runs on
    background: list[DeferredTask] = field(default_factory=list)


async def run_best_effort(name: str, func: Callable[..., Awaitable[object]], *args) -> None:
    """Run deferred work, logging instead of raising."""
    try:
        await func(*args)
    except Exception as e:
        logger.exception(f"{name} failed: {e}")


class WebhookHandler:
    def __init__(self, settings: Settings, gitlab: GitPlatform, locks: CommitLocks | None = None):
        self.event_filter = EventFilter(settings)
        self.guard = IdempotencyGuard(gitlab)
        self.tokens = TriggerTokenResolver(gitlab, static_token=settings.trigger_token)
        self.trigger = PipelineTrigger(gitlab)
        self.canceller = RedundantBuildCanceller(gitlab)
        self.branch_remover = SourceBranchRemover(gitlab, exceptions=settings.remove_source_exceptions)
        self.locks = locks

    async def handle(self, event: MergeRequestEvent) -> Outcome:
        """Decide whether the event triggers a pipeline and do it.

        Branch-flag updates and the redundant build sweep are returned as
        deferred tasks in Outcome.background; they never change the outcome.
        """
        if event.object_attributes is not None:
            self._log_event(event)

        decision = self.event_filter.evaluate(event)
        if decision.verdict == Verdict.REJECT:
            return self._respond(Outcome(decision.status_code, "rejected", decision.reason))

        mr = event.object_attributes

        background: list[DeferredTask] = []
        if decision.remove_source_branch:
            background.append(partial(
                run_best_effort,
                "Updating remove_source_branch",
                self.branch_remover.mark_for_removal,
                mr.source_project_id,
                mr.iid,
                mr.source_branch,
            ))

        if decision.verdict == Verdict.SKIP:
            return self._respond(Outcome(decision.status_code, "skipped", decision.reason, background=background))

        key = (mr.source_project_id, mr.last_commit.id)
        async with self.locks.hold(key) if self.locks is not None else nullcontext():
            outcome = await self._trigger(event)

        if outcome.pipeline_id is not None:
            background.append(partial(
                run_best_effort,
                "Cancelling redundant builds",
                self.canceller.cancel_redundant,
                mr.source_project_id,
                outcome.ref,
                outcome.pipeline_id,
            ))
        outcome.background = background + outcome.background
        return self._respond(outcome)

    async def _trigger(self, event: MergeRequestEvent) -> Outcome:
        mr = event.object_attributes
        sha = mr.last_commit.id

        try:
            existing = await self.guard.existing_pipeline(mr.source_project_id, sha)
        except GitLabError as e:
            return Outcome(500, "error", f"error getting details of the commit: {e}")
        if existing is not None:
            return Outcome(
                200,
                "exists",
                f"commit: {sha} already has associated pipeline: {existing.id}",
                pipeline_id=existing.id,
                # a commit pipeline runs on the branch it was pushed to
                ref=existing.ref or mr.source_branch,
            )

        try:
            token = await self.tokens.resolve(mr.source_project_id)
        except GitLabError as e:
            return Outcome(500, "error", f"error getting trigger token - {e}")

        try:
            pipeline_id = await self.trigger.run(event, token)
        except GitLabError as e:
            return Outcome(500, "error", f"error triggering pipeline - {e}")

        return Outcome(
            201,
            "created",
            f"created pipeline id: {pipeline_id}",
            pipeline_id=pipeline_id,
            ref=pipeline_ref(mr),
        )

    def _log_event(self, event: MergeRequestEvent) -> None:
        mr = event.object_attributes
        logger.info(
            f"[MR] state: {mr.state} id: {mr.id} iid: {mr.iid} action: {mr.action} "
            f"project: {mr.source.http_url} branches: {mr.source_branch} > {mr.target_branch} "
            f"commit: {mr.last_commit.id} @ {mr.last_commit.timestamp} "
            f"wip: {mr.work_in_progress} merge_status: {mr.merge_status}"
        )

    def _respond(self, outcome: Outcome) -> Outcome:
        logger.info(f"[RESPONSE] {outcome.status_code} : {outcome.message}")
        return outcome
