from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class SessionConfig(AppConfig):
    name = "escape_game.session"
    verbose_name = _("Game session")
