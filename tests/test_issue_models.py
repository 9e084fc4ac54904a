import json
from datetime import timedelta

import pytest
from pydantic import ValidationError

from jira_aging.domain.models import Issue, IssuePage, parse_jira_timestamp


def _history(created: str, *items: dict, author: str = "alice") -> dict:
    return {
        "id": "1",
        "author": {"name": author, "displayName": author.title(), "emailAddress": f"{author}@example.com"},
        "created": created,
        "items": list(items),
    }


def _status(to: str) -> dict:
    return {"field": "status", "from": "1", "fromString": "Open", "to": "3", "toString": to}


def test_parse_jira_timestamp_keeps_offset_and_millis():
    parsed = parse_jira_timestamp("2017-12-15T11:02:01.443-0500")
    assert parsed.utcoffset() == timedelta(hours=-5)
    assert (parsed.hour, parsed.microsecond) == (11, 443000)


def test_parse_jira_timestamp_without_fraction_or_with_colon_offset():
    assert parse_jira_timestamp("2017-12-15T11:02:01-0500").second == 1
    assert parse_jira_timestamp("2017-12-15T11:02:01.443-05:00").utcoffset() == timedelta(hours=-5)


def test_parse_jira_timestamp_rejects_garbage():
    with pytest.raises(ValueError):
        parse_jira_timestamp("yesterday")


def test_latest_status_change_uses_last_status_item():
    issue = Issue.model_validate(
        {
            "key": "ABC-1",
            "changelog": {
                "histories": [
                    _history("2018-11-01T09:00:00.000-0500", _status("In Progress")),
                    _history(
                        "2018-11-02T10:00:00.000-0500",
                        {"field": "assignee", "toString": "Bob"},
                        _status("In Testing"),
                        author="bob",
                    ),
                    _history("2018-11-03T10:00:00.000-0500", {"field": "priority", "toString": "High"}),
                ]
            },
        }
    )

    change = issue.latest_status_change()

    assert change is not None
    assert change.status == "In Testing"
    assert change.changed_at.day == 2
    assert change.changed_by.name == "bob"
    assert change.changed_by.label() == "Bob"


def test_latest_status_change_none_without_status_items():
    issue = Issue.model_validate(
        {"key": "ABC-2", "changelog": {"histories": [_history("2018-11-01T09:00:00.000-0500")]}}
    )
    assert issue.latest_status_change() is None


def test_issue_page_decodes_jira_payload():
    payload = {
        "expand": "schema,names",
        "startAt": 50,
        "maxResults": 50,
        "total": 51,
        "issues": [
            {
                "id": "10001",
                "key": "ABC-9",
                "self": "https://jira.example.com/rest/agile/1.0/issue/10001",
                "changelog": {
                    "startAt": 0,
                    "maxResults": 1,
                    "total": 1,
                    "histories": [_history("2018-11-05T14:10:25.073-0600", _status("In Progress"))],
                },
            }
        ],
    }

    page = IssuePage.model_validate_json(json.dumps(payload))

    assert (page.start_at, page.max_results, page.total) == (50, 50, 51)
    assert page.issues[0].key == "ABC-9"
    assert page.issues[0].changelog.histories[0].created.utcoffset() == timedelta(hours=-6)


def test_issue_page_rejects_bad_timestamp():
    payload = {"issues": [{"key": "ABC-1", "changelog": {"histories": [_history("not a date")]}}]}
    with pytest.raises(ValidationError):
        IssuePage.model_validate_json(json.dumps(payload))
