"""Unit tests for the storage facade."""

import pytest
from sqlalchemy.exc import IntegrityError

from class_election.models import Gender, Phase
from class_election.scripts.seed_candidates import DEMO_CANDIDATES, seed_candidates
from class_election.storage import DatabaseStorage


def _candidate(storage: DatabaseStorage, name: str, gender: str, *, approved: bool = True):
    candidate = storage.create_candidate(
        name=name,
        nickname=name.split()[0],
        bio=f"{name} bio",
        platform=f"{name} platform",
        gender=gender,
    )
    if approved:
        storage.approve_candidate(candidate.id)
    return candidate


class TestPhase:
    def test_defaults_to_registration(self, storage):
        assert storage.get_phase() == Phase.REGISTRATION

    def test_set_phase_overwrites_singleton(self, storage):
        storage.set_phase(Phase.VOTING)
        assert storage.get_phase() == Phase.VOTING

        storage.set_phase("results")
        assert storage.get_phase() == Phase.RESULTS

    def test_any_phase_can_follow_any_phase(self, storage):
        storage.set_phase(Phase.RESULTS)
        storage.set_phase(Phase.REGISTRATION)
        assert storage.get_phase() == Phase.REGISTRATION

    def test_rejects_unknown_phase(self, storage):
        with pytest.raises(ValueError):
            storage.set_phase("counting")


class TestCandidates:
    def test_create_starts_unapproved_with_zero_votes(self, storage):
        candidate = storage.create_candidate(
            name="Ana Oliveira",
            nickname="Aninha",
            bio="...",
            platform="...",
            gender="female",
        )

        assert candidate.id is not None
        assert candidate.approved is False
        assert candidate.votes == 0
        assert candidate.gender == Gender.FEMALE
        assert candidate.photo_url is None
        assert candidate.created_at is not None

    def test_blank_photo_url_is_stored_as_none(self, storage):
        candidate = storage.create_candidate(
            name="Pedro", nickname="P", bio="b", platform="p", gender="male", photo_url=""
        )
        assert candidate.photo_url is None

    def test_list_is_ordered_by_name(self, storage):
        _candidate(storage, "Mariana Costa", "female")
        _candidate(storage, "Carlos Silva", "male")
        _candidate(storage, "Julia Souza", "female", approved=False)

        names = [c.name for c in storage.get_candidates()]
        assert names == ["Carlos Silva", "Julia Souza", "Mariana Costa"]

    def test_approve_is_idempotent(self, storage):
        candidate = _candidate(storage, "Ana Oliveira", "female", approved=False)

        first = storage.approve_candidate(candidate.id)
        second = storage.approve_candidate(candidate.id)

        assert first.approved is True
        assert second.approved is True
        assert second.votes == 0
        assert len(storage.get_candidates()) == 1

    def test_approve_unknown_returns_none(self, storage):
        assert storage.approve_candidate(999) is None

    def test_delete_removes_candidate(self, storage):
        candidate = _candidate(storage, "Carlos Silva", "male")
        assert storage.delete_candidate(candidate.id) is True
        assert storage.get_candidate(candidate.id) is None
        assert storage.delete_candidate(candidate.id) is False

    def test_delete_with_votes_fails_on_foreign_key(self, storage):
        male = _candidate(storage, "Carlos Silva", "male")
        female = _candidate(storage, "Ana Oliveira", "female")
        storage.submit_vote("voter-1", male.id, female.id)

        with pytest.raises(IntegrityError):
            storage.delete_candidate(male.id)

        assert storage.get_candidate(male.id) is not None


class TestVotes:
    def test_submit_vote_records_ballot_and_tallies(self, storage):
        male = _candidate(storage, "Carlos Silva", "male")
        female = _candidate(storage, "Ana Oliveira", "female")

        assert storage.has_user_voted("voter-1") is False
        storage.submit_vote("voter-1", male.id, female.id)

        assert storage.has_user_voted("voter-1") is True
        assert storage.has_user_voted("voter-2") is False
        assert storage.get_candidate(male.id).votes == 1
        assert storage.get_candidate(female.id).votes == 1

    def test_failed_ballot_rolls_back_every_write(self, storage):
        male = _candidate(storage, "Carlos Silva", "male")

        # male slot is valid, female slot references a missing candidate
        with pytest.raises(IntegrityError):
            storage.submit_vote("voter-1", male.id, 999)

        assert storage.has_user_voted("voter-1") is False
        assert storage.get_candidate(male.id).votes == 0

    def test_results_cover_every_candidate(self, storage):
        male = _candidate(storage, "Carlos Silva", "male")
        female = _candidate(storage, "Ana Oliveira", "female")
        other = _candidate(storage, "Julia Souza", "female")
        storage.submit_vote("voter-1", male.id, female.id)
        storage.submit_vote("voter-2", male.id, female.id)

        results = {row["candidate_id"]: row["votes"] for row in storage.get_results()}
        assert results == {male.id: 2, female.id: 2, other.id: 0}


class TestUsers:
    def test_upsert_then_make_admin(self, storage):
        user = storage.upsert_user(user_id="u-1", email="a@school.test", first_name="Ana")
        assert user.is_admin is False

        storage.make_admin("u-1")
        assert storage.get_user("u-1").is_admin is True

        # a later claim refresh keeps the flag
        storage.upsert_user(user_id="u-1", email="ana@school.test", first_name="Ana")
        user = storage.get_user("u-1")
        assert user.is_admin is True
        assert user.email == "ana@school.test"

    def test_make_admin_unknown_user_is_noop(self, storage):
        storage.make_admin("ghost")
        assert storage.get_user("ghost") is None


class TestSeeding:
    def test_seeds_only_an_empty_table(self, engine, storage):
        assert seed_candidates(engine) == len(DEMO_CANDIDATES)
        assert seed_candidates(engine) == 0

        candidates = storage.get_candidates()
        assert len(candidates) == 6
        assert all(c.approved for c in candidates)

    def test_existing_candidates_block_seeding(self, engine, storage):
        _candidate(storage, "Carlos Silva", "male", approved=False)
        assert seed_candidates(engine) == 0
        assert [c.name for c in storage.get_candidates()] == ["Carlos Silva"]
