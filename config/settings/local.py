from .base import *  # noqa: F403
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = True
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="t1Vb0CmQh5cQ3iVt8pXx2bNn7sWk6yLr4eUa9dGz0oJfHq5MZcTPvRwYs2KlEuIn",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]  # noqa: S104

# Your stuff...
# ------------------------------------------------------------------------------
ESCAPE_GAME_WIRE_DIALECT = env("ESCAPE_GAME_WIRE_DIALECT", default="legacy")
