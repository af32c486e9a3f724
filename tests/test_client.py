"""Client wrapper and phase views, driven through the in-process app."""

import pytest

from class_election.client import ApiError, ElectionClient, render_dashboard
from class_election.client.views import load_dashboard, render_results, winners

from conftest import candidate_payload


@pytest.fixture
def api(make_client) -> ElectionClient:
    return ElectionClient(make_client())


@pytest.fixture
def admin_api(make_client) -> ElectionClient:
    client = ElectionClient(make_client())
    client.login("teacher-1", first_name="Johnny")
    return client


def _candidate(cid, name, gender, votes=0, approved=True):
    return {
        "id": cid,
        "name": name,
        "nickname": name.split()[0],
        "gender": gender,
        "approved": approved,
        "votes": votes,
        "platform": "More projects",
    }


class TestElectionClient:
    def test_anonymous_reads(self, api):
        assert api.get_phase() == "registration"
        assert api.list_candidates() == []
        assert api.vote_status() is False
        assert api.current_user() is None

    def test_errors_carry_server_message(self, api):
        with pytest.raises(ApiError) as excinfo:
            api.create_candidate(**candidate_payload())
        assert excinfo.value.status_code == 401
        assert excinfo.value.message == "Unauthorized"

    def test_full_flow(self, api, admin_api):
        api.login("student-1", first_name="Maria")
        male = api.create_candidate(**candidate_payload(name="Carlos Silva", gender="male"))
        female = api.create_candidate(**candidate_payload())
        assert female["approved"] is False

        with pytest.raises(ApiError) as excinfo:
            api.approve_candidate(female["id"])
        assert excinfo.value.status_code == 403

        assert admin_api.approve_candidate(male["id"])["approved"] is True
        admin_api.approve_candidate(female["id"])
        assert admin_api.set_phase("voting") == "voting"

        assert api.submit_vote(male["id"], female["id"]) == "Vote submitted"
        assert api.vote_status() is True

        with pytest.raises(ApiError) as excinfo:
            api.submit_vote(male["id"], female["id"])
        assert excinfo.value.message == "Already voted"

        tallies = {row["candidateId"]: row["votes"] for row in api.get_results()}
        assert tallies == {male["id"]: 1, female["id"]: 1}

    def test_delete_candidate(self, api, admin_api):
        api.login("student-1")
        created = api.create_candidate(**candidate_payload())
        admin_api.delete_candidate(created["id"])
        assert api.list_candidates() == []

    def test_logout(self, api):
        api.login("student-1", first_name="Maria")
        assert api.current_user()["firstName"] == "Maria"
        api.logout()
        assert api.current_user() is None


class TestViews:
    def test_registration_view_lists_pending(self):
        out = render_dashboard("registration", [_candidate(1, "Ana Oliveira", "female", approved=False)])
        assert "[Registration]" in out
        assert "Ana (Ana Oliveira) [pending approval]" in out
        assert "Admin panel" not in out

    def test_registration_view_empty(self):
        assert "No candidates yet" in render_dashboard("registration", [])

    def test_ballot_shows_only_approved_by_gender(self):
        candidates = [
            _candidate(1, "Carlos Silva", "male"),
            _candidate(2, "Pedro Santos", "male", approved=False),
            _candidate(3, "Ana Oliveira", "female"),
        ]
        out = render_dashboard("voting", candidates)
        assert "( ) #1 Carlos" in out
        assert "#2 Pedro" not in out
        assert "( ) #3 Ana" in out

    def test_ballot_after_voting(self):
        out = render_dashboard("voting", [_candidate(1, "Carlos Silva", "male")], has_voted=True)
        assert "Your vote has been recorded" in out
        assert "( )" not in out

    def test_results_winners_and_ties(self):
        candidates = [
            _candidate(1, "Carlos Silva", "male", votes=3),
            _candidate(2, "Pedro Santos", "male", votes=5),
            _candidate(3, "Ana Oliveira", "female", votes=4),
            _candidate(4, "Julia Souza", "female", votes=4),
        ]
        assert [c["id"] for c in winners(candidates, "male")] == [2]
        assert [c["id"] for c in winners(candidates, "female")] == [3, 4]

        out = render_results(candidates)
        assert "Male representative: Pedro" in out
        assert "Female representative: Ana, Julia" in out
        assert "1. #2 Pedro (Pedro Santos) - 5 vote(s)" in out

    def test_no_winner_without_votes(self):
        assert winners([_candidate(1, "Carlos Silva", "male")], "male") == []
        assert "Male representative: no winner" in render_results([_candidate(1, "Carlos Silva", "male")])

    def test_admin_panel(self):
        candidates = [_candidate(1, "Ana Oliveira", "female", approved=False)]
        out = render_dashboard("results", candidates, is_admin=True)
        assert "Admin panel" in out
        assert "Switch phase: registration, voting" in out
        assert "Pending approval (1):" in out

    def test_unknown_phase_falls_back_to_registration(self):
        assert "[Registration]" in render_dashboard("bogus", [])

    def test_load_dashboard(self, admin_api):
        out = load_dashboard(admin_api)
        assert "[Registration]" in out
        assert "Admin panel" in out
