from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import update
from sqlmodel import Session, select

from .models.candidate import Candidate, Gender
from .models.setting import DEFAULT_PHASE, PHASE_KEY, Phase, Setting
from .models.user import User, utcnow
from .models.vote import Vote

logger = logging.getLogger(__name__)


class DatabaseStorage:
    """
    Narrow repository facade over one SQLModel session.

    Route handlers own the policy checks (auth, admin, already-voted, phase);
    this class only reads and writes rows. Every mutating method commits.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # -------------------------
    # Settings
    # -------------------------

    def get_phase(self) -> Phase:
        row = self.session.get(Setting, PHASE_KEY)
        if row is None:
            return DEFAULT_PHASE
        try:
            return Phase(row.value)
        except ValueError:
            logger.warning("Unknown phase %r stored in settings; using %s", row.value, DEFAULT_PHASE.value)
            return DEFAULT_PHASE

    def set_phase(self, phase: Union[Phase, str]) -> Phase:
        phase = Phase(phase)
        row = self.session.get(Setting, PHASE_KEY)
        if row is None:
            row = Setting(key=PHASE_KEY, value=phase.value)
        else:
            row.value = phase.value
        self.session.add(row)
        self.session.commit()
        return phase

    # -------------------------
    # Candidates
    # -------------------------

    def get_candidates(self) -> List[Candidate]:
        return list(self.session.exec(select(Candidate).order_by(Candidate.name, Candidate.id)).all())

    def get_candidate(self, candidate_id: int) -> Optional[Candidate]:
        return self.session.get(Candidate, candidate_id)

    def create_candidate(
        self,
        *,
        name: str,
        nickname: str,
        bio: str,
        platform: str,
        gender: Union[Gender, str],
        photo_url: Optional[str] = None,
    ) -> Candidate:
        """
        Insert a self-registered candidate. approved/votes always start at their defaults.
        """
        candidate = Candidate(
            name=name,
            nickname=nickname,
            bio=bio,
            platform=platform,
            photo_url=photo_url or None,
            gender=Gender(gender),
            approved=False,
            votes=0,
        )
        self.session.add(candidate)
        self.session.commit()
        self.session.refresh(candidate)
        return candidate

    def approve_candidate(self, candidate_id: int) -> Optional[Candidate]:
        candidate = self.session.get(Candidate, candidate_id)
        if candidate is None:
            return None
        if not candidate.approved:
            candidate.approved = True
            self.session.add(candidate)
            self.session.commit()
            self.session.refresh(candidate)
        return candidate

    def delete_candidate(self, candidate_id: int) -> bool:
        """
        Delete a candidate row. Vote rows pointing at it are NOT removed; with
        foreign keys enforced the commit fails and the error propagates.
        """
        candidate = self.session.get(Candidate, candidate_id)
        if candidate is None:
            return False
        self.session.delete(candidate)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return True

    # -------------------------
    # Votes
    # -------------------------

    def has_user_voted(self, user_id: str) -> bool:
        return self.session.exec(select(Vote.id).where(Vote.user_id == user_id).limit(1)).first() is not None

    def submit_vote(self, user_id: str, male_candidate_id: int, female_candidate_id: int) -> None:
        """
        Record a full ballot in one transaction:
          male vote row, male tally +1, female vote row, female tally +1.
        Any failure rolls back all four writes.
        """
        slots = (
            (Gender.MALE, male_candidate_id),
            (Gender.FEMALE, female_candidate_id),
        )
        try:
            for gender, candidate_id in slots:
                self.session.add(Vote(user_id=user_id, candidate_id=candidate_id, gender=gender))
                self.session.flush()
                self.session.connection().execute(
                    update(Candidate)
                    .where(Candidate.id == candidate_id)
                    .values(votes=Candidate.votes + 1)
                )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def get_results(self) -> List[Dict[str, Any]]:
        rows = self.session.exec(select(Candidate.id, Candidate.votes).order_by(Candidate.id)).all()
        return [{"candidate_id": cid, "votes": votes or 0} for cid, votes in rows]

    # -------------------------
    # Users
    # -------------------------

    def get_user(self, user_id: str) -> Optional[User]:
        return self.session.get(User, user_id)

    def upsert_user(
        self,
        *,
        user_id: str,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        profile_image_url: Optional[str] = None,
    ) -> User:
        """
        Mirror the identity provider claim into the users table.
        is_admin is never touched here.
        """
        user = self.session.get(User, user_id)
        if user is None:
            user = User(id=user_id)
        user.email = email
        user.first_name = first_name
        user.last_name = last_name
        user.profile_image_url = profile_image_url
        user.updated_at = utcnow()
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def make_admin(self, user_id: str) -> None:
        user = self.session.get(User, user_id)
        if user is None or user.is_admin:
            return
        user.is_admin = True
        user.updated_at = utcnow()
        self.session.add(user)
        self.session.commit()
        logger.info("Promoted user %s to admin", user_id)
