from fastapi import APIRouter, Depends, HTTPException, Response, status

from auth import get_current_user
from services.cache_tags import CacheTagsInvalidator, TagAwareCache, members_cache_tag
from services.team_membership_manager import TeamMembershipManager
from shared.auth_utils import has_role
from shared.config import MEMBERS_CACHE_MAX_AGE
from shared.dependencies import (get_cache_tags_invalidator, get_entity_type_manager, get_render_cache,
                                 get_team_membership_manager, get_translator)
from shared.exceptions import NotFound
from shared.translation import Translator
from teams.entity_types import EntityTypeManager
from teams.forms.confirm_form import ConfirmFormRenderer, FormState, Messenger
from teams.forms.remove_team_member_form import RemoveTeamMemberForm
from teams.models import Developer, Team
from teams.schemas.confirm_form import (ConfirmFormSubmitRequest, ConfirmPrompt, FormSubmissionResult,
                                        FormSubmissionStatusEnum)
from teams.schemas.team_members import TeamMembersResponse

# Mantidos para as ferramentas interativas (/docs e /redoc).
responses_get_members = {
    200: {"description": "Team members returned successfully."},
    404: {"description": "The team with the given id was not found."},
    502: {"description": "The membership service could not be reached."}
}
responses_remove_member = {
    200: {"description": "The form was submitted or cancelled."},
    403: {"description": "The user is not allowed to manage team members."},
    404: {"description": "The team or the developer was not found."},
    422: {"description": "The developer is not a member of the team."},
    502: {"description": "The membership service could not be reached."}
}

MANAGE_MEMBERS_ROLES = ("team_admin", "administrator")

router = APIRouter(
    prefix="/api/v1/teams/{team_id}/members",
    tags=["Team Members"]
)


def load_team(entity_type_manager: EntityTypeManager, team_id: str) -> Team:
    team = entity_type_manager.get_storage("team").load(team_id)
    if not team:
        raise NotFound(entity_type_manager.get_definition("team").label)
    return team


def load_developer(entity_type_manager: EntityTypeManager, developer_email: str) -> Developer:
    developer = entity_type_manager.get_storage("developer").load(developer_email)
    if not developer:
        raise NotFound("Developer")
    return developer


def check_manage_members_access(current_user: dict):
    if not has_role(current_user["roles"], *MANAGE_MEMBERS_ROLES):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not allowed to manage the members of this team."
        )


def get_remove_team_member_form(
        entity_type_manager: EntityTypeManager = Depends(get_entity_type_manager),
        team_membership_manager: TeamMembershipManager = Depends(get_team_membership_manager),
        cache_tags_invalidator: CacheTagsInvalidator = Depends(get_cache_tags_invalidator),
        translator: Translator = Depends(get_translator)) -> RemoveTeamMemberForm:
    return RemoveTeamMemberForm(
        entity_type_manager,
        team_membership_manager,
        cache_tags_invalidator,
        Messenger(),
        translator,
    )


@router.get("/", response_model=TeamMembersResponse, responses=responses_get_members)
async def get_team_members_by_team_id(team_id: str,
                                      entity_type_manager: EntityTypeManager = Depends(get_entity_type_manager),
                                      team_membership_manager: TeamMembershipManager = Depends(
                                          get_team_membership_manager),
                                      cache: TagAwareCache = Depends(get_render_cache),
                                      current_user: dict = Depends(get_current_user)):
    """
    Get Team Members By Team Id

    Lista os e-mails dos membros de uma equipe. É o destino do botão
    "Cancel" do formulário de remoção.

    - **Autenticação**: Requer um token de usuário válido.
    - A resposta fica em cache com a tag ``team:<team_id>:members``, invalidada
      quando um membro é removido e expirada após ``MEMBERS_CACHE_MAX_AGE`` segundos.

    **Exemplo de Resposta:**

    .. code-block:: json

       {
         "team_id": "t1",
         "members": ["a@x.com", "b@x.com"]
       }
    """
    team = load_team(entity_type_manager, team_id)

    cache_key = f"team_members:{team.id}"
    members = cache.get(cache_key)

    if members is None:
        members = await team_membership_manager.get_members(team.id)
        cache.set(cache_key, members, [members_cache_tag(team.id)], max_age=MEMBERS_CACHE_MAX_AGE)

    return TeamMembersResponse(team_id=team.id, members=members)


@router.get("/{developer_email}/remove", response_model=ConfirmPrompt, responses=responses_remove_member)
async def get_remove_team_member_form_prompt(team_id: str,
                                             developer_email: str,
                                             form: RemoveTeamMemberForm = Depends(get_remove_team_member_form),
                                             entity_type_manager: EntityTypeManager = Depends(
                                                 get_entity_type_manager),
                                             translator: Translator = Depends(get_translator),
                                             current_user: dict = Depends(get_current_user)):
    """
    Get Remove Team Member Form

    Retorna a pergunta de confirmação para remover um desenvolvedor da equipe.

    - **Autenticação**: Requer um token de usuário válido.
    - **Autorização**: O usuário deve ter o papel 'team_admin' ou 'administrator'.

    **Exemplo de Resposta:**

    .. code-block:: json

       {
         "form_id": "team_member_remove_form",
         "question": "Are you sure you want to remove jdoe from the team?",
         "description": "This action cannot be undone.",
         "confirm_text": "Confirm",
         "cancel_text": "Cancel",
         "cancel_url": "/api/v1/teams/t1/members/"
       }
    """
    check_manage_members_access(current_user)

    team = load_team(entity_type_manager, team_id)
    developer = load_developer(entity_type_manager, developer_email)

    return form.build(ConfirmFormRenderer(translator), team, developer)


@router.post("/{developer_email}/remove", response_model=FormSubmissionResult, responses=responses_remove_member)
async def submit_remove_team_member_form(team_id: str,
                                         developer_email: str,
                                         form_request: ConfirmFormSubmitRequest,
                                         response: Response,
                                         form: RemoveTeamMemberForm = Depends(get_remove_team_member_form),
                                         entity_type_manager: EntityTypeManager = Depends(
                                             get_entity_type_manager),
                                         translator: Translator = Depends(get_translator),
                                         current_user: dict = Depends(get_current_user)):
    """
    Submit Remove Team Member Form

    Confirma (ou cancela) a remoção de um desenvolvedor da equipe.

    - **Autenticação**: Requer um token de usuário válido.
    - **Autorização**: O usuário deve ter o papel 'team_admin' ou 'administrator'.
    - **Cancelamento** (`confirm: false`): nada é alterado, apenas o redirecionamento
      para a listagem de membros.
    - **Validação**: O desenvolvedor precisa ser membro da equipe; caso contrário a
      resposta é 422 e a remoção não é tentada.
    - Uma falha do serviço de membros não gera erro HTTP: é reportada em
      `messages.error`.

    **Exemplo de Corpo da Requisição (Payload):**

    .. code-block:: json

       {
         "confirm": true,
         "form_id": "team_member_remove_form"
       }

    **Exemplo de Resposta:**

    .. code-block:: json

       {
         "status": "submitted",
         "redirect_url": "/api/v1/teams/t1/members/",
         "errors": [],
         "messages": {
           "status": ["jdoe successfully removed from the team."],
           "error": []
         }
       }
    """
    check_manage_members_access(current_user)

    team = load_team(entity_type_manager, team_id)
    developer = load_developer(entity_type_manager, developer_email)

    renderer = ConfirmFormRenderer(translator)
    form.build(renderer, team, developer)

    form_state = FormState(values=form_request.model_dump(exclude_none=True))
    result = await renderer.process(form, form_state, form.messenger, form_request.confirm)

    if result.status == FormSubmissionStatusEnum.invalid:
        response.status_code = 422

    return result
