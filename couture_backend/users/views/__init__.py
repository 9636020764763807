from .auth import LoginView, RegisterView
from .me import MeView, PasswordChangeView

__all__ = [
    "RegisterView",
    "LoginView",
    "MeView",
    "PasswordChangeView",
]
