"""
Cross-referencing events to users and teams.

Chat lines only carry the sender's display name, so their team is looked up
by name. That lookup is best-effort: two users with the same name, or a user
who renamed mid-match, resolve to whichever matching user comes first in the
table. Deaths carry user ids and resolve exactly.
"""

from collections.abc import Iterable, Mapping

from tfsight.core.constants import Team
from tfsight.core.models import UNKNOWN_USER, User


def resolve_team_by_name(name: str, users: Iterable[User] | Mapping[int, User]) -> Team:
    """Team of the first user whose name equals ``name`` exactly, else Team.OTHER."""
    if isinstance(users, Mapping):
        users = users.values()
    for user in users:
        if user.name == name:
            return user.team
    return Team.OTHER


def resolve_user(user_id: int | None, users: Mapping[int, User]) -> User:
    """The user with ``user_id``, or the Unknown placeholder when it is not in the table."""
    if user_id is None:
        return UNKNOWN_USER
    return users.get(user_id, UNKNOWN_USER)
