from typing import List

from tripsplit.models.base import MongoModel


class Member(MongoModel):
    name: str
    color: str = ""   # display tag, e.g. "bg-sky-400"
    avatar: str = ""  # avatar URL


def _avatar(seed: str) -> str:
    return f"https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"


# Roster written to an empty members collection on first start
DEFAULT_MEMBERS: List[Member] = [
    Member(id="m1", name="Me", color="bg-sky-400", avatar=_avatar("Aria")),
    Member(id="m2", name="Buddy A", color="bg-rose-400", avatar=_avatar("Bella")),
    Member(id="m3", name="Buddy B", color="bg-amber-400", avatar=_avatar("Chloe")),
    Member(id="m4", name="Buddy C", color="bg-emerald-400", avatar=_avatar("Dora")),
    Member(id="m5", name="Buddy D", color="bg-indigo-400", avatar=_avatar("Emma")),
]
