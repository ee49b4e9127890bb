import copy
import pytest
from mr_trigger.config import Settings


GITLAB_URL = "https://gitlab.example.com"
PROJECT_URL = f"{GITLAB_URL}/group/app.git"

MR_PAYLOAD = {
    "object_kind": "merge_request",
    "user": {"username": "dev"},
    "object_attributes": {
        "id": 9001,
        "iid": 12,
        "source_branch": "feature",
        "target_branch": "main",
        "source_project_id": 42,
        "target_project_id": 42,
        "source": {"name": "app", "web_url": f"{GITLAB_URL}/group/app", "http_url": PROJECT_URL},
        "target": {"name": "app", "web_url": f"{GITLAB_URL}/group/app", "http_url": PROJECT_URL},
        "state": "opened",
        "action": "open",
        "work_in_progress": False,
        "merge_status": "unchecked",
        "last_commit": {
            "id": "abc123",
            "message": "Add feature",
            "timestamp": "2024-05-01T10:00:00+00:00",
        },
    },
}


@pytest.fixture
def mr_payload():
    return copy.deepcopy(MR_PAYLOAD)


@pytest.fixture
def settings():
    return Settings(gitlab_url=GITLAB_URL, private_token="private")
