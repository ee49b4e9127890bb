from pydantic import BaseModel, ConfigDict, model_validator


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class GitLabProject(_Frozen):
    name: str = ""
    web_url: str = ""
    http_url: str = ""


class GitLabPipelineRef(_Frozen):
    id: int


class GitLabCommit(_Frozen):
    id: str
    message: str = ""
    timestamp: str | None = None
    last_pipeline: GitLabPipelineRef | None = None


class GitLabMergeRequest(_Frozen):
    id: int  # instance-wide id
    iid: int  # project-local id
    source_branch: str
    target_branch: str
    source_project_id: int
    target_project_id: int | None = None
    source: GitLabProject
    target: GitLabProject
    state: str  # opened, reopened, merged, closed
    action: str | None = None  # open, reopen, update, close, merge, ...
    work_in_progress: bool = False
    merge_status: str | None = None
    last_commit: GitLabCommit


class MergeRequestEvent(_Frozen):
    object_kind: str  # "merge_request"
    object_attributes: GitLabMergeRequest | None = None

    @model_validator(mode="before")
    @classmethod
    def drop_foreign_attributes(cls, data):
        """Other event kinds carry differently shaped attributes; leave them out."""
        if isinstance(data, dict) and data.get("object_kind") != "merge_request":
            return {key: value for key, value in data.items() if key != "object_attributes"}
        return data

    @model_validator(mode="after")
    def require_attributes(self):
        if self.object_kind == "merge_request" and self.object_attributes is None:
            raise ValueError("merge_request event without object_attributes")
        return self
