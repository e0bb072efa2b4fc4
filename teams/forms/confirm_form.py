from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from shared.translation import Translator
from teams.schemas.confirm_form import ConfirmPrompt, FormSubmissionResult, FormSubmissionStatusEnum


@dataclass
class FormState:
    values: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    redirect_url: Optional[str] = None

    def set_error(self, message: str) -> None:
        self.errors.append(message)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def set_redirect_url(self, url: str) -> None:
        self.redirect_url = url


@dataclass
class Messenger:
    """Avisos exibidos ao usuário ao final da requisição."""

    status: List[str] = field(default_factory=list)
    error: List[str] = field(default_factory=list)

    def add_status(self, message: str) -> None:
        self.status.append(message)

    def add_error(self, message: str) -> None:
        self.error.append(message)

    def all(self) -> Dict[str, List[str]]:
        return {"status": list(self.status), "error": list(self.error)}


class ConfirmForm(Protocol):
    form_id: str

    def question(self) -> str: ...

    def cancel_url(self) -> str: ...

    async def validate(self, form_state: FormState) -> None: ...

    async def submit(self, form_state: FormState) -> None: ...


def validate_confirm_form(form: ConfirmForm, form_state: FormState, translator: Optional[Translator] = None) -> None:
    translator = translator or Translator()

    submitted_form_id = form_state.values.get("form_id")
    if submitted_form_id is not None and submitted_form_id != form.form_id:
        form_state.set_error(translator.t("The form has become outdated. Please reload the page and try again."))


class ConfirmFormRenderer:
    """
    Fluxo genérico de confirmação (sim/não).

    O formulário fica em "aguardando confirmação" até ser enviado; o envio é
    terminal: ou é cancelado (nada acontece além do redirecionamento) ou é
    confirmado, quando ``validate`` e depois ``submit`` são executados.
    ``submit`` nunca roda se ``validate`` registrou algum erro.
    """

    description = "This action cannot be undone."
    confirm_text = "Confirm"
    cancel_text = "Cancel"

    def __init__(self, translator: Optional[Translator] = None):
        self.translator = translator or Translator()

    def build(self, form: ConfirmForm) -> ConfirmPrompt:
        return ConfirmPrompt(
            form_id=form.form_id,
            question=form.question(),
            description=self.translator.t(self.description),
            confirm_text=self.translator.t(self.confirm_text),
            cancel_text=self.translator.t(self.cancel_text),
            cancel_url=form.cancel_url(),
        )

    async def process(self,
                      form: ConfirmForm,
                      form_state: FormState,
                      messenger: Messenger,
                      confirmed: bool) -> FormSubmissionResult:
        if not confirmed:
            return FormSubmissionResult(
                status=FormSubmissionStatusEnum.cancelled,
                redirect_url=form.cancel_url(),
                messages=messenger.all(),
            )

        await form.validate(form_state)

        if form_state.has_errors():
            return FormSubmissionResult(
                status=FormSubmissionStatusEnum.invalid,
                redirect_url=form_state.redirect_url or form.cancel_url(),
                errors=list(form_state.errors),
                messages=messenger.all(),
            )

        await form.submit(form_state)

        return FormSubmissionResult(
            status=FormSubmissionStatusEnum.submitted,
            redirect_url=form_state.redirect_url or form.cancel_url(),
            messages=messenger.all(),
        )
