import gettext
from typing import Mapping, Optional


class Translator:
    """
    Traduz mensagens e interpola os placeholders ``{nome}`` com o contexto.

    Sem catálogo configurado a mensagem original é usada.
    """

    def __init__(self, translations: Optional[gettext.NullTranslations] = None):
        self.translations = translations or gettext.NullTranslations()

    def t(self, message: str, context: Optional[Mapping] = None) -> str:
        translated = self.translations.gettext(message)
        if not context:
            return translated
        return translated.format_map(dict(context))
