import re

from config import settings

from .base import Controller
from .rendering import render

LOGIN_URL = "/login"
EMAIL_SHAPE = re.compile(r"\S+@\S+\.\S+")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_SHAPE.search(email or ""))


def is_valid_password(password: str) -> bool:
    return len(password or "") >= settings.min_password_length


class LoginController(Controller):
    """Login form: client-side checks, then POST /login and an inline message."""

    name = "login"

    def __init__(self, client):
        super().__init__(client)
        self.user = None
        self.email = ""
        # nothing to fetch before the form is usable
        self.handlers = self.events()

    def load(self):
        pass

    def events(self):
        return {"submit:login": self.handle_login}

    def render(self) -> str:
        return render("login.html", email=self.email, message=self.message)

    def handle_login(self, email: str, password: str) -> bool:
        email = (email or "").strip()
        password = (password or "").strip()
        self.email = email

        if not is_valid_email(email):
            self.show_message("Invalid email format.")
            return False
        if not is_valid_password(password):
            self.show_message(f"Password must be at least {settings.min_password_length} characters.")
            return False

        body = self.attempt("Login", self.client.post, LOGIN_URL, json={"email": email, "password": password},
                            inline=True)
        if body is None:
            return False

        self.user = body.get("user")
        self.email = ""
        self.show_message("Login successful!", "success")
        return True
