import logging
from typing import List, Optional
from urllib.parse import quote

import httpx

from shared.config import MEMBERSHIP_SERVICE_URL, MEMBERSHIP_SERVICE_TOKEN, MEMBERSHIP_SERVICE_TIMEOUT
from shared.exceptions import TeamMembershipError

logger = logging.getLogger(__name__)


class TeamMembershipManager:
    """
    Cliente do serviço externo que mantém os membros (e-mails de
    desenvolvedores) de cada equipe.
    """

    def __init__(self,
                 base_url: str = MEMBERSHIP_SERVICE_URL,
                 access_token: Optional[str] = MEMBERSHIP_SERVICE_TOKEN,
                 timeout: float = MEMBERSHIP_SERVICE_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return httpx.AsyncClient(timeout=self.timeout, headers=headers, transport=self.transport)

    def _members_url(self, team_id: str) -> str:
        return f"{self.base_url}/companies/{quote(team_id, safe='')}/developers"

    async def get_members(self, team_id: str) -> List[str]:
        """
        Retorna os e-mails dos membros da equipe.

        **Exemplo de resposta do serviço:**

        .. code-block:: json

           {
             "developer": [
               {"email": "a@x.com", "role": ["admin"]},
               {"email": "b@x.com", "role": []}
             ]
           }
        """
        async with self._client() as client:
            try:
                response = await client.get(self._members_url(team_id))
                response.raise_for_status()
                members = parse_members(response.json())

            except httpx.HTTPStatusError as e:
                raise TeamMembershipError(
                    f"Membership service error while listing members of team {team_id}: {e.response.status_code}."
                ) from e

            except httpx.RequestError as e:
                raise TeamMembershipError(
                    f"Network error while listing members of team {team_id}: {str(e)}"
                ) from e

            except ValueError as e:
                raise TeamMembershipError(
                    f"Invalid response from the membership service for team {team_id}: {str(e)}"
                ) from e

        logger.debug("Team %s has %d member(s).", team_id, len(members))
        return members

    async def remove_members(self, team_id: str, developers: List[str]) -> None:
        """
        Remove os desenvolvedores (por e-mail) da equipe, um por requisição.

        Qualquer falha interrompe a operação e é relançada como
        ``TeamMembershipError``.
        """
        async with self._client() as client:
            for email in developers:
                url = f"{self._members_url(team_id)}/{quote(email, safe='@')}"
                try:
                    response = await client.delete(url)
                    response.raise_for_status()

                except httpx.HTTPStatusError as e:
                    error_message = f"Membership service error while removing {email} from team {team_id}: {e.response.status_code}."
                    try:
                        error_data = e.response.json()
                    except ValueError:
                        error_data = None

                    if isinstance(error_data, dict):
                        error_detail = error_data.get("detail") or error_data.get("message")
                        if error_detail:
                            error_message += f" Detail: {error_detail}"
                    else:
                        error_message += f" Response: {e.response.text}"
                    raise TeamMembershipError(error_message) from e

                except httpx.RequestError as e:
                    raise TeamMembershipError(
                        f"Network error while removing {email} from team {team_id}: {str(e)}"
                    ) from e

                logger.info("Developer %s removed from team %s.", email, team_id)


def parse_members(response_data) -> List[str]:
    if not isinstance(response_data, dict):
        raise ValueError("expected a JSON object")

    developers = response_data.get("developer", [])
    if not isinstance(developers, list):
        raise ValueError("'developer' must be a list")

    return [item["email"] for item in developers if isinstance(item, dict) and item.get("email")]
