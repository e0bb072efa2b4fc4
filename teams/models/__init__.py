from teams.models.developer import Developer
from teams.models.teams import Team
from teams.models.user import User
