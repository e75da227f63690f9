"""
Tests for Rating API Endpoints
"""

from unittest.mock import patch

SCORES = {"innovation": 8, "technical": 9, "feasibility": 7, "presentation": 8}


class TestRatingEndpoints:
    def test_out_of_range_score(self, client, mock_zerodb):
        response = client.post(
            "/ratings",
            json={
                "project_id": "p-1",
                "judge_id": "j-1",
                "scores": {**SCORES, "technical": 12},
            },
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Ratings must be between 1 and 10"}
        mock_zerodb.tables.query_rows.assert_not_called()

    @patch("api.routes.ratings.submit_rating")
    def test_design_is_accepted_for_feasibility(self, mock_submit, client):
        mock_submit.return_value = {"rating_id": "r-1"}
        scores = {k: v for k, v in SCORES.items() if k != "feasibility"}

        response = client.post(
            "/ratings",
            json={"project_id": "p-1", "judge_id": "j-1", "scores": {**scores, "design": 6}},
        )

        assert response.status_code == 200
        assert response.json() == {"id": "r-1"}
        assert mock_submit.call_args[1]["scores"]["feasibility"] == 6

    @patch("api.routes.ratings.update_rating")
    def test_revise_rating(self, mock_update, client):
        mock_update.return_value = {
            "rating_id": "r-1",
            "project_id": "p-1",
            "judge_id": "j-1",
            "scores": SCORES,
            "overall": 8.0,
            "feedback": "Better",
        }

        response = client.put("/ratings/r-1", json={"judge_id": "j-1", "feedback": "Better"})

        assert response.status_code == 200
        assert response.json()["feedback"] == "Better"
        assert mock_update.call_args[1]["scores"] is None

    def test_ratings_for_project(self, client, mock_zerodb):
        mock_zerodb.tables.query_all_rows.return_value = [
            {
                "rating_id": "r-1",
                "project_id": "p-1",
                "judge_id": "j-1",
                "scores": SCORES,
                "overall": 8.0,
            }
        ]

        response = client.get("/ratings/project/p-1")

        assert response.status_code == 200
        assert response.json()[0]["overall"] == 8.0
        mock_zerodb.tables.query_all_rows.assert_called_once_with(
            "ratings", filter={"project_id": "p-1"}
        )

    def test_unassigned_judge_rejected_for_event_without_judges(self, client, mock_zerodb):
        mock_zerodb.tables.query_rows.side_effect = [
            [{"project_id": "p-1", "event_id": "evt-1"}],
            [{"event_id": "evt-1", "judges": []}],
        ]

        response = client.post(
            "/ratings",
            json={
                "project_id": "p-1",
                "judge_id": "random-user",
                "event_id": "evt-1",
                "scores": SCORES,
            },
        )

        assert response.status_code == 403
        assert response.json() == {"error": "Not assigned as judge for this event"}
        mock_zerodb.tables.insert_rows.assert_not_called()
