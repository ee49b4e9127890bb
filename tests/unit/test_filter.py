import pytest
from mr_trigger.config import Settings
from mr_trigger.models.webhook import MergeRequestEvent
from mr_trigger.relay.filter import EventFilter, Verdict


def evaluate(payload, settings, **overrides):
    payload["object_attributes"].update(overrides)
    return EventFilter(settings).evaluate(MergeRequestEvent(**payload))


@pytest.mark.parametrize("action", ["open", "reopen", "update"])
def test_admits_triggering_actions(mr_payload, settings, action):
    decision = evaluate(mr_payload, settings, action=action)
    assert decision.verdict == Verdict.ADMIT


def test_rejects_other_object_kinds(settings):
    event = MergeRequestEvent(object_kind="push")

    decision = EventFilter(settings).evaluate(event)

    assert decision.verdict == Verdict.REJECT
    assert decision.status_code == 422
    assert "push" in decision.reason


def test_skips_closed_merge_request(mr_payload, settings):
    decision = evaluate(mr_payload, settings, action="close", state="closed")

    assert decision.verdict == Verdict.SKIP
    assert decision.status_code == 203
    assert "close" in decision.reason


def test_skips_missing_action(mr_payload, settings):
    del mr_payload["object_attributes"]["action"]

    decision = EventFilter(settings).evaluate(MergeRequestEvent(**mr_payload))

    assert decision.verdict == Verdict.SKIP
    assert decision.status_code == 203


def test_skips_merged_when_disabled(mr_payload, settings):
    decision = evaluate(mr_payload, settings, action="merge", state="merged")

    assert decision.verdict == Verdict.SKIP
    assert decision.status_code == 203
    assert "merged" in decision.reason


def test_admits_merged_when_enabled(mr_payload):
    settings = Settings(gitlab_url="https://gitlab.example.com", private_token="p", trigger_merged=True)

    decision = evaluate(mr_payload, settings, action="merge", state="merged")

    assert decision.verdict == Verdict.ADMIT


def test_skips_work_in_progress(mr_payload, settings):
    decision = evaluate(mr_payload, settings, work_in_progress=True)

    assert decision.verdict == Verdict.SKIP
    assert decision.status_code == 202


def test_rejects_foreign_host(mr_payload, settings):
    foreign = {"name": "app", "http_url": "https://elsewhere.example.org/group/app.git"}

    decision = evaluate(mr_payload, settings, source=foreign, target=foreign)

    assert decision.verdict == Verdict.REJECT
    assert decision.status_code == 404


def test_rejects_forks(mr_payload, settings):
    fork = {"name": "app", "http_url": "https://gitlab.example.com/someone/app.git"}

    decision = evaluate(mr_payload, settings, source=fork)

    assert decision.verdict == Verdict.REJECT
    assert decision.status_code == 400
    assert decision.reason == "forks are not supported"


def test_open_requests_source_branch_removal(mr_payload, settings):
    decision = evaluate(mr_payload, settings)
    assert decision.remove_source_branch is True


def test_update_does_not_request_source_branch_removal(mr_payload, settings):
    decision = evaluate(mr_payload, settings, action="update")
    assert decision.remove_source_branch is False


def test_open_wip_still_requests_source_branch_removal(mr_payload, settings):
    decision = evaluate(mr_payload, settings, work_in_progress=True)

    assert decision.verdict == Verdict.SKIP
    assert decision.remove_source_branch is True


def test_rejected_fork_does_not_request_source_branch_removal(mr_payload, settings):
    fork = {"name": "app", "http_url": "https://gitlab.example.com/someone/app.git"}

    decision = evaluate(mr_payload, settings, source=fork)

    assert decision.remove_source_branch is False


def test_rejects_lookalike_host(mr_payload, settings):
    lookalike = {"name": "app", "http_url": "https://gitlab.example.com.evil.org/group/app.git"}

    decision = evaluate(mr_payload, settings, source=lookalike, target=lookalike)

    assert decision.verdict == Verdict.REJECT
    assert decision.status_code == 404
    assert decision.remove_source_branch is False
