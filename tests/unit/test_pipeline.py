import pytest
from unittest.mock import AsyncMock
from mr_trigger.models.gitlab import Pipeline
from mr_trigger.models.webhook import MergeRequestEvent
from mr_trigger.relay.pipeline import PipelineTrigger, build_variables, pipeline_ref


def test_pipeline_ref_uses_source_branch(mr_payload):
    mr = MergeRequestEvent(**mr_payload).object_attributes
    assert pipeline_ref(mr) == "feature"


def test_pipeline_ref_uses_target_branch_when_merged(mr_payload):
    mr_payload["object_attributes"].update(state="merged", action="merge")
    mr = MergeRequestEvent(**mr_payload).object_attributes
    assert pipeline_ref(mr) == "main"


def test_build_variables(mr_payload):
    mr = MergeRequestEvent(**mr_payload).object_attributes

    assert build_variables(mr) == {
        "CI_MERGE_REQUEST": "true",
        "CI_MERGE_REQUEST_ID": "9001",
        "CI_MERGE_REQUEST_IID": "12",
        "CI_MERGE_REQUEST_ACTION": "open",
        "CI_MERGE_REQUEST_STATE": "opened",
        "CI_MERGE_REQUEST_TARGET_URL": "https://gitlab.example.com/group/app.git",
        "CI_MERGE_REQUEST_TARGET_BRANCH": "main",
        "CI_MERGE_REQUEST_SOURCE_BRANCH": "feature",
    }


@pytest.mark.asyncio
async def test_trigger_runs_against_source_project(mr_payload):
    gitlab = AsyncMock()
    gitlab.trigger_pipeline.return_value = Pipeline(id=555)
    event = MergeRequestEvent(**mr_payload)

    pipeline_id = await PipelineTrigger(gitlab).run(event, "tok")

    assert pipeline_id == 555
    kwargs = gitlab.trigger_pipeline.call_args.kwargs
    assert kwargs["project_id"] == 42
    assert kwargs["ref"] == "feature"
    assert kwargs["token"] == "tok"
    assert kwargs["variables"]["CI_MERGE_REQUEST_IID"] == "12"
