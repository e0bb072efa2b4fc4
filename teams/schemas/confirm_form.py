from enum import Enum

from pydantic import BaseModel, Field

from typing import Dict, List, Optional


class FormSubmissionStatusEnum(str, Enum):
    submitted = 'submitted'
    cancelled = 'cancelled'
    invalid = 'invalid'


class ConfirmPrompt(BaseModel):
    form_id: str
    question: str
    description: str
    confirm_text: str
    cancel_text: str
    cancel_url: str


class ConfirmFormSubmitRequest(BaseModel):
    confirm: bool
    form_id: Optional[str] = None


class FormSubmissionResult(BaseModel):
    status: FormSubmissionStatusEnum
    redirect_url: str
    errors: List[str] = Field(default_factory=list)
    messages: Dict[str, List[str]] = Field(default_factory=dict)
