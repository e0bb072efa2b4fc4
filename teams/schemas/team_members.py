from pydantic import BaseModel

from typing import List


class TeamMembersResponse(BaseModel):
    team_id: str
    members: List[str]
