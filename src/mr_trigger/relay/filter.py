from dataclasses import dataclass
from enum import Enum

from mr_trigger.config import Settings
from mr_trigger.models.webhook import MergeRequestEvent


TRIGGERING_ACTIONS = ("open", "reopen", "update")


class Verdict(str, Enum):
    ADMIT = "admit"
    SKIP = "skip"
    REJECT = "reject"


@dataclass(frozen=True)
class Decision:
    """Admission decision for one event, with the HTTP status it maps to."""
    verdict: Verdict
    reason: str = ""
    status_code: int = 200
    remove_source_branch: bool = False


class EventFilter:
    def __init__(self, settings: Settings):
        self.gitlab_url = settings.gitlab_url
        self.trigger_merged = settings.trigger_merged

    def evaluate(self, event: MergeRequestEvent) -> Decision:
        if event.object_kind != "merge_request":
            return Decision(
                Verdict.REJECT,
                f"unsupported object kind: {event.object_kind}",
                status_code=422,
            )

        mr = event.object_attributes
        host_error = self._check_source(event)
        remove_source_branch = mr.action == "open" and host_error is None

        if mr.action not in TRIGGERING_ACTIONS:
            if mr.state != "merged":
                return Decision(
                    Verdict.SKIP,
                    f"ignored MR action: {mr.action}",
                    status_code=203,
                    remove_source_branch=remove_source_branch,
                )
            if not self.trigger_merged:
                return Decision(
                    Verdict.SKIP,
                    "ignored merged MR: triggering merged requests is disabled",
                    status_code=203,
                    remove_source_branch=remove_source_branch,
                )

        if mr.work_in_progress:
            return Decision(
                Verdict.SKIP,
                "Work In Progress - skipping build",
                status_code=202,
                remove_source_branch=remove_source_branch,
            )

        if host_error is not None:
            return host_error

        return Decision(Verdict.ADMIT, remove_source_branch=remove_source_branch)

    def _check_source(self, event: MergeRequestEvent) -> Decision | None:
        """Reject sources outside this GitLab instance and forks."""
        mr = event.object_attributes
        if not mr.source.http_url.startswith(f"{self.gitlab_url}/"):
            return Decision(
                Verdict.REJECT,
                f"{mr.source.http_url} is not on {self.gitlab_url}",
                status_code=404,
            )
        if mr.source.http_url != mr.target.http_url:
            return Decision(Verdict.REJECT, "forks are not supported", status_code=400)
        return None
