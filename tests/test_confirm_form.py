import asyncio

from teams.forms.confirm_form import ConfirmFormRenderer, FormState, Messenger, validate_confirm_form
from teams.schemas.confirm_form import FormSubmissionStatusEnum


class StubForm:
    form_id = "stub_form"

    def __init__(self, error=None, redirect_url=None):
        self.error = error
        self.redirect_url = redirect_url
        self.calls = []

    def question(self):
        return "Really?"

    def cancel_url(self):
        return "/cancel"

    async def validate(self, form_state):
        self.calls.append("validate")
        if self.error:
            form_state.set_error(self.error)
        validate_confirm_form(self, form_state)

    async def submit(self, form_state):
        self.calls.append("submit")
        if self.redirect_url:
            form_state.set_redirect_url(self.redirect_url)


def test_build_uses_the_form_callbacks() -> None:
    prompt = ConfirmFormRenderer().build(StubForm())

    assert prompt.model_dump() == {
        "form_id": "stub_form",
        "question": "Really?",
        "description": "This action cannot be undone.",
        "confirm_text": "Confirm",
        "cancel_text": "Cancel",
        "cancel_url": "/cancel",
    }


def test_cancel_skips_validate_and_submit() -> None:
    form = StubForm()

    result = asyncio.run(ConfirmFormRenderer().process(form, FormState(), Messenger(), confirmed=False))

    assert result.status == FormSubmissionStatusEnum.cancelled
    assert result.redirect_url == "/cancel"
    assert form.calls == []


def test_validation_error_short_circuits_submit() -> None:
    form = StubForm(error="Nope.")

    result = asyncio.run(ConfirmFormRenderer().process(form, FormState(), Messenger(), confirmed=True))

    assert result.status == FormSubmissionStatusEnum.invalid
    assert result.errors == ["Nope."]
    assert result.redirect_url == "/cancel"
    assert form.calls == ["validate"]


def test_confirmed_submission_runs_validate_then_submit() -> None:
    form = StubForm()
    messenger = Messenger()
    messenger.add_status("Done.")

    result = asyncio.run(ConfirmFormRenderer().process(form, FormState(), messenger, confirmed=True))

    assert result.status == FormSubmissionStatusEnum.submitted
    assert result.redirect_url == "/cancel"
    assert result.messages == {"status": ["Done."], "error": []}
    assert form.calls == ["validate", "submit"]


def test_submit_may_override_the_redirect() -> None:
    form = StubForm(redirect_url="/elsewhere")

    result = asyncio.run(ConfirmFormRenderer().process(form, FormState(), Messenger(), confirmed=True))

    assert result.redirect_url == "/elsewhere"


def test_validate_confirm_form_checks_the_submitted_form_id() -> None:
    form = StubForm()

    matching = FormState(values={"form_id": "stub_form"})
    validate_confirm_form(form, matching)
    missing = FormState(values={})
    validate_confirm_form(form, missing)
    outdated = FormState(values={"form_id": "other_form"})
    validate_confirm_form(form, outdated)

    assert not matching.has_errors()
    assert not missing.has_errors()
    assert outdated.errors == ["The form has become outdated. Please reload the page and try again."]


def test_messenger_keeps_notices_by_type() -> None:
    messenger = Messenger()

    messenger.add_status("ok")
    messenger.add_error("failed")
    messenger.add_error("failed again")

    assert messenger.all() == {"status": ["ok"], "error": ["failed", "failed again"]}
