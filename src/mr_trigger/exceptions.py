"""GitLab API exceptions."""


class GitLabError(Exception):
    """Base exception for failed GitLab calls."""


class GitLabApiError(GitLabError):
    """Raised when the GitLab API returns a non-success response."""

    def __init__(self, status_code: int, status_text: str, body: str = "") -> None:
        self.status_code = status_code
        self.status_text = status_text
        self.body = body
        super().__init__(f"{status_code} {status_text} {body}".rstrip())
