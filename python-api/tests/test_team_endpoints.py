"""
Tests for Team Management API Endpoints

Includes the full invite round trip against a small in-memory stand-in for
the teams and users tables.
"""

from unittest.mock import patch

import pytest
from fastapi import HTTPException


@pytest.fixture
def team_store(mock_zerodb):
    """Teams and users tables that apply the updates the service issues."""
    state = {
        "teams": [
            {
                "team_id": "team-1",
                "name": "Team Alpha",
                "description": "",
                "leader_id": "user-lead",
                "members": ["user-lead"],
                "invites": [],
                "event_id": None,
            }
        ],
        "users": [{"user_id": "user-grace", "email": "grace@example.com"}],
    }

    async def query_rows(table_name, filter=None, skip=0, limit=100):
        return [dict(row) for row in state[table_name]]

    async def update_rows(table_name, filter, update):
        team = state["teams"][0]
        guard = filter.get("invites", {}).get("$elemMatch")
        if guard:
            invite = next(
                (i for i in team["invites"] if i["invite_id"] == guard["invite_id"]), None
            )
            if not invite or invite["status"] != guard["status"]:
                return {"matched_count": 0, "modified_count": 0}
            for key, value in update.get("$set", {}).items():
                invite[key.rsplit(".", 1)[-1]] = value
        pushed = update.get("$push", {}).get("invites")
        if pushed:
            team["invites"] = team["invites"] + [pushed]
        for member in update.get("$addToSet", {}).values():
            if member not in team["members"]:
                team["members"] = team["members"] + [member]
        return {"matched_count": 1, "modified_count": 1}

    mock_zerodb.tables.query_rows.side_effect = query_rows
    mock_zerodb.tables.update_rows.side_effect = update_rows
    return state


class TestCreateTeamEndpoint:
    def test_create_team_returns_id(self, client, mock_zerodb):
        response = client.post("/teams", json={"name": "Team Alpha", "leader_id": "user-lead"})

        assert response.status_code == 200
        stored = mock_zerodb.tables.insert_rows.call_args[1]["rows"][0]
        assert response.json() == {"id": stored["team_id"]}
        assert stored["members"] == ["user-lead"]

    def test_whitespace_name_rejected(self, client):
        response = client.post("/teams", json={"name": "   ", "leader_id": "user-lead"})

        assert response.status_code == 400

    @patch("api.routes.teams.create_team")
    def test_service_value_error_is_400(self, mock_create, client):
        mock_create.side_effect = ValueError("Team name cannot be empty")

        response = client.post("/teams", json={"name": "Team", "leader_id": "user-lead"})

        assert response.status_code == 400
        assert response.json() == {"error": "Team name cannot be empty"}


def test_invite_accept_and_reuse(client, team_store):
    """Leader invites, the invitee joins with the invite, reuse is rejected."""
    invite = client.post(
        "/teams/team-1/invite",
        json={"email": "grace@example.com", "invited_by": "user-lead"},
    )
    assert invite.status_code == 200
    invite_id = invite.json()["invite_id"]
    assert team_store["teams"][0]["invites"][0]["status"] == "pending"

    joined = client.post(
        "/teams/team-1/join", json={"user_id": "user-grace", "invite_id": invite_id}
    )
    assert joined.status_code == 200
    assert joined.json() == {"success": True}

    team = team_store["teams"][0]
    assert "user-grace" in team["members"]
    assert team["invites"][0]["status"] == "accepted"

    again = client.post(
        "/teams/team-1/join", json={"user_id": "user-grace", "invite_id": invite_id}
    )
    assert again.status_code == 400
    assert again.json() == {"error": "Invalid or expired invite"}


def test_decline_then_decline_again(client, team_store):
    team_store["teams"][0]["invites"] = [
        {"invite_id": "inv-1", "email": "grace@example.com", "status": "pending"}
    ]

    first = client.put("/teams/team-1/decline-invite/inv-1")
    second = client.put("/teams/team-1/decline-invite/inv-1")

    assert first.json() == {"success": True, "message": "Invitation declined"}
    assert second.status_code == 400
    assert second.json() == {"error": "Invite is no longer pending"}


@patch("api.routes.teams.remove_member")
def test_remove_member_takes_actor_from_body(mock_remove, client):
    mock_remove.return_value = {"success": True, "message": "Member removed successfully"}

    response = client.request(
        "DELETE", "/teams/team-1/members/user-b", json={"removed_by": "user-lead"}
    )

    assert response.status_code == 200
    assert mock_remove.call_args[1] == {
        "team_id": "team-1",
        "user_id": "user-b",
        "removed_by": "user-lead",
    }


@patch("api.routes.teams.add_member")
def test_add_member_forbidden(mock_add, client):
    mock_add.side_effect = HTTPException(
        status_code=403, detail="Only team leader can add members directly"
    )

    response = client.post(
        "/teams/team-1/add-member", json={"email": "grace@example.com", "added_by": "user-b"}
    )

    assert response.status_code == 403
    assert response.json() == {"error": "Only team leader can add members directly"}


def test_get_team(client, team_store):
    response = client.get("/teams/team-1")

    assert response.status_code == 200
    assert response.json()["leader_id"] == "user-lead"
