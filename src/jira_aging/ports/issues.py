from jira_aging.domain.models import IssuePage


class IssuePagePort:
    """Reads pages of board issues, each with its changelog expanded."""

    def fetch_page(self, board_id: int, start_at: int) -> IssuePage:
        raise NotImplementedError
