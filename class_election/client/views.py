from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from .api import ElectionClient

PHASES = ("registration", "voting", "results")

PHASE_LABELS = {
    "registration": "Registration",
    "voting": "Voting",
    "results": "Results",
}

GENDER_LABELS = {
    "male": "Male representative",
    "female": "Female representative",
}

Candidate = Dict[str, Any]


# -----------------------------
# Small primitives
# -----------------------------

def truncate(s: Optional[str], limit: int = 120) -> str:
    if not s:
        return ""
    if len(s) <= limit:
        return s
    return s[: max(0, limit - 3)] + "..."


def by_gender(candidates: Sequence[Candidate], gender: str, *, approved_only: bool = False) -> List[Candidate]:
    out = [c for c in candidates if c.get("gender") == gender]
    if approved_only:
        out = [c for c in out if c.get("approved")]
    return out


def leaderboard(candidates: Sequence[Candidate], gender: str) -> List[Candidate]:
    """
    Approved candidates of one gender, most votes first (name breaks ties).
    """
    rows = by_gender(candidates, gender, approved_only=True)
    return sorted(rows, key=lambda c: (-int(c.get("votes") or 0), str(c.get("name") or "")))


def winners(candidates: Sequence[Candidate], gender: str) -> List[Candidate]:
    """
    Top vote-getters of one gender. Ties share the win; nobody wins with zero votes.
    """
    board = leaderboard(candidates, gender)
    if not board:
        return []
    top = int(board[0].get("votes") or 0)
    if top <= 0:
        return []
    return [c for c in board if int(c.get("votes") or 0) == top]


def candidate_line(c: Candidate, *, show_votes: bool = False, show_status: bool = False) -> str:
    label = f"#{c.get('id')} {c.get('nickname')} ({c.get('name')})"
    if show_status and not c.get("approved"):
        label += " [pending approval]"
    if show_votes:
        label += f" - {int(c.get('votes') or 0)} vote(s)"
    return label


# -----------------------------
# Views
# -----------------------------

def render_phase_indicator(phase: str) -> str:
    steps = []
    for p in PHASES:
        name = PHASE_LABELS[p]
        steps.append(f"[{name}]" if p == phase else name)
    return " > ".join(steps)


def render_registration(candidates: Sequence[Candidate]) -> str:
    lines = [
        "Got good ideas for the class? Register now to be the next representative.",
        "Fields: name, nickname, gender (male/female), bio, platform, photo URL (optional).",
        "",
        "Registered candidates:",
    ]
    if not candidates:
        lines.append("  No candidates yet. Be the first!")
    for c in candidates:
        lines.append(f"  {candidate_line(c, show_status=True)}")
        if c.get("platform"):
            lines.append(f"      {truncate(c.get('platform'))}")
    return "\n".join(lines)


def render_ballot(candidates: Sequence[Candidate], has_voted: bool) -> str:
    if has_voted:
        return (
            "Your vote has been recorded.\n"
            "Thank you for taking part. Results will be announced by the teacher."
        )

    lines = ["Pick one male and one female representative. Your vote is single and secret."]
    for gender in ("male", "female"):
        lines.append("")
        lines.append(f"{GENDER_LABELS[gender]}:")
        options = by_gender(candidates, gender, approved_only=True)
        if not options:
            lines.append("  No approved candidates.")
        for c in options:
            lines.append(f"  ( ) {candidate_line(c)}")
    return "\n".join(lines)


def render_results(candidates: Sequence[Candidate]) -> str:
    lines = ["Election results"]
    for gender in ("male", "female"):
        lines.append("")
        top = winners(candidates, gender)
        if top:
            names = ", ".join(str(c.get("nickname")) for c in top)
            lines.append(f"{GENDER_LABELS[gender]}: {names}")
        else:
            lines.append(f"{GENDER_LABELS[gender]}: no winner")
        for rank, c in enumerate(leaderboard(candidates, gender), start=1):
            lines.append(f"  {rank}. {candidate_line(c, show_votes=True)}")
    return "\n".join(lines)


def render_admin_panel(phase: str, candidates: Sequence[Candidate]) -> str:
    lines = [
        "Admin panel",
        f"  Current phase: {PHASE_LABELS.get(phase, phase)}",
        "  Switch phase: " + ", ".join(p for p in PHASES if p != phase),
    ]
    pending = [c for c in candidates if not c.get("approved")]
    lines.append(f"  Pending approval ({len(pending)}):")
    for c in pending:
        lines.append(f"    {candidate_line(c)}")
    return "\n".join(lines)


def render_dashboard(
    phase: str,
    candidates: Sequence[Candidate],
    *,
    has_voted: bool = False,
    is_admin: bool = False,
) -> str:
    """
    Full page for one phase; the admin panel is appended for admins.
    Unknown phases fall back to registration.
    """
    if phase not in PHASES:
        phase = "registration"

    sections = [render_phase_indicator(phase)]
    if phase == "registration":
        sections.append(render_registration(candidates))
    elif phase == "voting":
        sections.append(render_ballot(candidates, has_voted))
    else:
        sections.append(render_results(candidates))

    if is_admin:
        sections.append(render_admin_panel(phase, candidates))

    return "\n\n".join(sections)


def load_dashboard(client: ElectionClient) -> str:
    """
    Fetch phase, candidates, vote status and user, then render.
    """
    phase = client.get_phase()
    candidates = client.list_candidates()
    has_voted = client.vote_status()
    user = client.current_user()
    is_admin = bool(user and user.get("isAdmin"))
    return render_dashboard(phase, candidates, has_voted=has_voted, is_admin=is_admin)
