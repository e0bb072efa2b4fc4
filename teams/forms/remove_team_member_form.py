import logging
from typing import Optional

from services.cache_tags import CacheTagsInvalidator, members_cache_tag
from services.team_membership_manager import TeamMembershipManager
from shared.errors import decode_exception
from shared.translation import Translator
from teams.entity_types import EntityTypeManager
from teams.forms.confirm_form import ConfirmFormRenderer, FormState, Messenger, validate_confirm_form
from teams.models import Developer, Team
from teams.schemas.confirm_form import ConfirmPrompt

logger = logging.getLogger(__name__)

FAILURE_LOG_TEMPLATE = (
    "Failed to remove {developer_mail} developer from {team_id} {team}. "
    "{message} {function} (line {line} of {file}).\n{backtrace_string}"
)


class RemoveTeamMemberForm:
    """
    Confirmação da remoção de um desenvolvedor de uma equipe.

    O par (equipe, desenvolvedor) é definido uma única vez em ``build`` e não
    muda até o fim da requisição.
    """

    form_id = "team_member_remove_form"

    def __init__(self,
                 entity_type_manager: EntityTypeManager,
                 team_membership_manager: TeamMembershipManager,
                 cache_tags_invalidator: CacheTagsInvalidator,
                 messenger: Messenger,
                 translator: Optional[Translator] = None,
                 form_logger: Optional[logging.Logger] = None):
        self.team_entity_type = entity_type_manager.get_definition("team")
        self.user_storage = entity_type_manager.get_storage("user")
        self.team_membership_manager = team_membership_manager
        self.cache_tags_invalidator = cache_tags_invalidator
        self.messenger = messenger
        self.translator = translator or Translator()
        self.logger = form_logger or logger

        self.team: Optional[Team] = None
        self.developer: Optional[Developer] = None

    def build(self, renderer: ConfirmFormRenderer, team: Team, developer: Developer) -> ConfirmPrompt:
        self.team = team
        self.developer = developer
        return renderer.build(self)

    def question(self) -> str:
        return self.translator.t("Are you sure you want to remove {developer} from the {team}?", {
            "developer": self.developer_label(),
            "team": self.team_entity_type.lowercase_label,
        })

    def cancel_url(self) -> str:
        return self.team.to_url("members")

    async def validate(self, form_state: FormState) -> None:
        members = await self.team_membership_manager.get_members(self.team.id)

        if self.developer.email not in members:
            form_state.set_error(self.translator.t("{developer} developer is not member of the {team_name} {team}.", {
                "developer": self.developer.label(),
                "team_name": self.team.label(),
                "team": self.team_entity_type.lowercase_label,
            }))
            form_state.set_redirect_url(self.cancel_url())

        validate_confirm_form(self, form_state, self.translator)

    async def submit(self, form_state: FormState) -> None:
        context = {
            "developer": self.developer_label(),
            "developer_mail": self.developer.email,
            "team": self.team_entity_type.lowercase_label,
            "team_id": self.team.id,
        }

        try:
            await self.team_membership_manager.remove_members(self.team.id, [self.developer.email])
        except Exception as exception:
            context.update(decode_exception(exception))
            self.messenger.add_error(
                self.translator.t("Failed to remove {developer} from the {team}. Please try again.", context))
            self.logger.error(FAILURE_LOG_TEMPLATE.format_map(context), extra={"context": context})
            return

        # A listagem de membros da equipe deixa de ser válida.
        self.cache_tags_invalidator.invalidate_tags([members_cache_tag(self.team.id)])
        self.messenger.add_status(self.translator.t("{developer} successfully removed from the {team}.", context))

    def developer_label(self) -> str:
        """
        Rótulo do desenvolvedor: o nome do usuário com o mesmo e-mail, ou o
        próprio e-mail quando não existe usuário.

        O cadastro de desenvolvedores e o de usuários podem estar fora de
        sincronia; o e-mail é o mesmo valor exibido na listagem de membros.
        """
        users = self.user_storage.load_by_properties({"mail": self.developer.email})
        if users:
            return users[0].label()
        return self.developer.email
