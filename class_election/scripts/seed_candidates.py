from __future__ import annotations

import logging
from typing import Dict, List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy import func
from sqlmodel import select

from class_election.database import init_db, session_scope
from class_election.models.candidate import Candidate
from class_election.storage import DatabaseStorage

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Seed data (demo ballot: three male, three female, all approved)
# ---------------------------------------------------------------------

DEMO_CANDIDATES: List[Dict[str, str]] = [
    {
        "name": "Carlos Silva",
        "nickname": "Carlinhos",
        "bio": "Focado em organização e eventos esportivos.",
        "platform": "Mais esportes e lazer.",
        "gender": "male",
    },
    {
        "name": "Pedro Santos",
        "nickname": "Pedrão",
        "bio": "Melhor comunicação com os professores.",
        "platform": "Transparência total.",
        "gender": "male",
    },
    {
        "name": "Lucas Ferreira",
        "nickname": "Lukinhas",
        "bio": "Inovação tecnológica na sala.",
        "platform": "Hackathons mensais.",
        "gender": "male",
    },
    {
        "name": "Ana Oliveira",
        "nickname": "Aninha",
        "bio": "Apoio aos estudos e grupos de monitoria.",
        "platform": "Ninguém fica pra trás.",
        "gender": "female",
    },
    {
        "name": "Mariana Costa",
        "nickname": "Mari",
        "bio": "Representatividade e inclusão.",
        "platform": "Voz para todos.",
        "gender": "female",
    },
    {
        "name": "Julia Souza",
        "nickname": "Juju",
        "bio": "Organização de festas e eventos culturais.",
        "platform": "Mais cultura na escola.",
        "gender": "female",
    },
]


def seed_candidates(engine: Optional[Engine] = None) -> int:
    """
    Insert the demo candidates when the candidates table is empty.
    Returns how many rows were created (0 if anything already exists).
    """
    with session_scope(engine) as session:
        existing = session.exec(select(func.count()).select_from(Candidate)).one()
        if existing:
            return 0

        storage = DatabaseStorage(session)
        for row in DEMO_CANDIDATES:
            candidate = storage.create_candidate(**row)
            storage.approve_candidate(candidate.id)
        return len(DEMO_CANDIDATES)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    init_db()
    created = seed_candidates()
    logger.info("Seed complete: %s candidates created", created)


if __name__ == "__main__":
    main()
