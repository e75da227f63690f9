"""
Tests for Team Management Service

Team creation and the invite lifecycle: pending -> accepted | declined, plus
leader-only direct adds and member removal.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException
from integrations.zerodb.exceptions import ZeroDBError
from services.team_service import (
    add_member,
    create_team,
    decline_invite,
    find_invite,
    get_team,
    join_team,
    remove_member,
    send_invite,
)

GRACE = {"user_id": "user-grace", "email": "grace@example.com", "name": "Grace"}


def make_team(**overrides):
    team = {
        "team_id": "team-1",
        "name": "Team Alpha",
        "leader_id": "user-lead",
        "members": ["user-lead"],
        "invites": [],
    }
    team.update(overrides)
    return team


def store(teams=None, users=None):
    """AsyncMock client whose query_rows answers per table."""
    client = AsyncMock()
    tables = {"teams": teams or [], "users": users or []}

    async def query_rows(table_name, filter=None, skip=0, limit=100):
        return tables[table_name]

    client.tables.query_rows.side_effect = query_rows
    client.tables.update_rows.return_value = {"matched_count": 1, "modified_count": 1}
    return client


class TestCreateTeam:
    @pytest.mark.asyncio
    async def test_leader_is_first_member(self):
        client = store()

        team = await create_team(client, name=" Team Alpha ", leader_id="user-lead")

        assert team["name"] == "Team Alpha"
        assert team["members"] == ["user-lead"]
        assert team["invites"] == []
        client.tables.insert_rows.assert_called_once_with("teams", rows=[team])

    @pytest.mark.asyncio
    async def test_blank_name_raises_value_error(self):
        with pytest.raises(ValueError):
            await create_team(store(), name="   ", leader_id="user-lead")

    @pytest.mark.asyncio
    async def test_store_error_is_500(self):
        client = store()
        client.tables.insert_rows.side_effect = ZeroDBError("insert failed")

        with pytest.raises(HTTPException) as exc_info:
            await create_team(client, name="Team Alpha", leader_id="user-lead")

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_get_team_not_found(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_team(store(), "missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Team not found"


class TestSendInvite:
    @pytest.mark.asyncio
    async def test_member_invites_registered_user(self):
        client = store(teams=[make_team()], users=[GRACE])

        result = await send_invite(client, "team-1", "Grace@Example.com", invited_by="user-lead")

        assert result["success"] is True
        kwargs = client.tables.update_rows.call_args[1]
        pushed = kwargs["update"]["$push"]["invites"]
        assert pushed["invite_id"] == result["invite_id"]
        assert pushed["email"] == "grace@example.com"
        assert pushed["status"] == "pending"
        assert kwargs["filter"]["members"] == {"$ne": "user-grace"}

    @pytest.mark.asyncio
    async def test_non_member_cannot_invite(self):
        client = store(teams=[make_team()], users=[GRACE])

        with pytest.raises(HTTPException) as exc_info:
            await send_invite(client, "team-1", "grace@example.com", invited_by="stranger")

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_email(self):
        client = store(teams=[make_team()])

        with pytest.raises(HTTPException) as exc_info:
            await send_invite(client, "team-1", "nobody@example.com", invited_by="user-lead")

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "User with this email not found"

    @pytest.mark.asyncio
    async def test_existing_member(self):
        client = store(teams=[make_team(members=["user-lead", "user-grace"])], users=[GRACE])

        with pytest.raises(HTTPException) as exc_info:
            await send_invite(client, "team-1", "grace@example.com", invited_by="user-lead")

        assert exc_info.value.detail == "User is already a team member"

    @pytest.mark.asyncio
    async def test_second_pending_invite_rejected(self):
        pending = {"invite_id": "inv-1", "email": "grace@example.com", "status": "pending"}
        client = store(teams=[make_team(invites=[pending])], users=[GRACE])

        with pytest.raises(HTTPException) as exc_info:
            await send_invite(client, "team-1", "grace@example.com", invited_by="user-lead")

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "User already has a pending invitation"
        client.tables.update_rows.assert_not_called()

    @pytest.mark.asyncio
    async def test_declined_invite_allows_new_invite(self):
        declined = {"invite_id": "inv-1", "email": "grace@example.com", "status": "declined"}
        client = store(teams=[make_team(invites=[declined])], users=[GRACE])

        result = await send_invite(client, "team-1", "grace@example.com", invited_by="user-lead")

        assert result["invite_id"] != "inv-1"


class TestJoinTeam:
    @pytest.mark.asyncio
    async def test_accepting_pending_invite(self):
        pending = {"invite_id": "inv-1", "email": "grace@example.com", "status": "pending"}
        client = store(teams=[make_team(invites=[pending])])

        result = await join_team(client, "team-1", "user-grace", invite_id="inv-1")

        assert result == {"success": True}
        kwargs = client.tables.update_rows.call_args[1]
        assert kwargs["filter"]["invites"] == {
            "$elemMatch": {"invite_id": "inv-1", "status": "pending"}
        }
        assert kwargs["update"]["$addToSet"] == {"members": "user-grace"}
        assert kwargs["update"]["$set"]["invites.$.status"] == "accepted"

    @pytest.mark.asyncio
    async def test_reusing_accepted_invite_rejected(self):
        accepted = {"invite_id": "inv-1", "email": "grace@example.com", "status": "accepted"}
        client = store(teams=[make_team(members=["user-lead", "user-grace"], invites=[accepted])])

        with pytest.raises(HTTPException) as exc_info:
            await join_team(client, "team-1", "user-grace", invite_id="inv-1")

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Invalid or expired invite"

    @pytest.mark.asyncio
    async def test_invite_consumed_concurrently(self):
        pending = {"invite_id": "inv-1", "email": "grace@example.com", "status": "pending"}
        client = store(teams=[make_team(invites=[pending])])
        client.tables.update_rows.return_value = {"matched_count": 0, "modified_count": 0}

        with pytest.raises(HTTPException) as exc_info:
            await join_team(client, "team-1", "user-grace", invite_id="inv-1")

        assert exc_info.value.detail == "Invalid or expired invite"

    @pytest.mark.asyncio
    async def test_direct_join_is_set_insert(self):
        client = store(teams=[make_team()])

        await join_team(client, "team-1", "user-grace")

        client.tables.update_rows.assert_called_once_with(
            "teams",
            filter={"team_id": "team-1"},
            update={"$addToSet": {"members": "user-grace"}},
        )


class TestDeclineInvite:
    @pytest.mark.asyncio
    async def test_decline_pending(self):
        pending = {"invite_id": "inv-1", "email": "grace@example.com", "status": "pending"}
        client = store(teams=[make_team(invites=[pending])])

        result = await decline_invite(client, "team-1", "inv-1")

        assert result == {"success": True, "message": "Invitation declined"}
        update = client.tables.update_rows.call_args[1]["update"]
        assert update["$set"]["invites.$.status"] == "declined"

    @pytest.mark.asyncio
    async def test_unknown_invite(self):
        with pytest.raises(HTTPException) as exc_info:
            await decline_invite(store(teams=[make_team()]), "team-1", "inv-x")

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_terminal_invite(self):
        accepted = {"invite_id": "inv-1", "status": "accepted"}

        with pytest.raises(HTTPException) as exc_info:
            await decline_invite(store(teams=[make_team(invites=[accepted])]), "team-1", "inv-1")

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Invite is no longer pending"


class TestMemberManagement:
    @pytest.mark.asyncio
    async def test_leader_adds_member(self):
        client = store(teams=[make_team()], users=[GRACE])

        result = await add_member(client, "team-1", "grace@example.com", added_by="user-lead")

        assert result["user_id"] == "user-grace"
        assert result["message"] == "Member added successfully"

    @pytest.mark.asyncio
    async def test_non_leader_cannot_add(self):
        client = store(teams=[make_team(members=["user-lead", "user-b"])], users=[GRACE])

        with pytest.raises(HTTPException) as exc_info:
            await add_member(client, "team-1", "grace@example.com", added_by="user-b")

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "Only team leader can add members directly"

    @pytest.mark.asyncio
    async def test_member_removes_themself(self):
        client = store(teams=[make_team(members=["user-lead", "user-b"])])

        result = await remove_member(client, "team-1", "user-b", removed_by="user-b")

        assert result["success"] is True
        assert client.tables.update_rows.call_args[1]["update"] == {
            "$pull": {"members": "user-b"}
        }

    @pytest.mark.asyncio
    async def test_leader_cannot_be_removed(self):
        client = store(teams=[make_team()])

        with pytest.raises(HTTPException) as exc_info:
            await remove_member(client, "team-1", "user-lead", removed_by="user-lead")

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Team leader cannot be removed"

    @pytest.mark.asyncio
    async def test_third_party_cannot_remove(self):
        client = store(teams=[make_team(members=["user-lead", "user-b", "user-c"])])

        with pytest.raises(HTTPException) as exc_info:
            await remove_member(client, "team-1", "user-b", removed_by="user-c")

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_removing_non_member(self):
        client = store(teams=[make_team()])

        with pytest.raises(HTTPException) as exc_info:
            await remove_member(client, "team-1", "user-z", removed_by="user-lead")

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Member not found in team"


def test_find_invite_matches_by_id():
    team = make_team(invites=[{"invite_id": "a"}, {"invite_id": "b"}])

    assert find_invite(team, "b") == {"invite_id": "b"}
    assert find_invite(team, "c") is None
