import html

from .base import Controller
from .rendering import render

WEEKLY_URL = "/weekly"


def parse_links(text: str) -> list[str]:
    """One link per line; blank lines dropped."""
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


class WeeksAdminController(Controller):
    """Manage Weekly Breakdown page: one form that adds a week, or updates one while in edit mode."""

    name = "weeks"

    def __init__(self, client):
        super().__init__(client)
        self.editing_id = None
        self.form = {}

    @property
    def form_title(self) -> str:
        return "Update Week" if self.editing_id is not None else "Add a New Week"

    @property
    def submit_label(self) -> str:
        return "Update Week" if self.editing_id is not None else "Add Week"

    def load(self):
        body = self.client.get(WEEKLY_URL, resource="weeks")
        self.store.replace(body["data"])

    def events(self):
        return {
            "submit:week": self.handle_submit,
            "click:table": self.handle_table_click,
            "click:cancel": self.reset_edit_mode,
        }

    def render(self) -> str:
        return render("weeks_table.html", weeks=self.store.items, form_title=self.form_title, message=self.message)

    def handle_submit(self, form: dict) -> bool:
        week = {
            "title": (form.get("title") or "").strip(),
            "start_date": form.get("start_date") or "",
            "description": (form.get("description") or "").strip(),
            "links": parse_links(form.get("links")),
        }

        if self.editing_id is None:
            body = self.attempt("Add week", self.client.post, WEEKLY_URL, json=week, resource="weeks", inline=True)
            if body is None:
                return False
            self.store.add(body.get("data") or {**week, "id": body.get("id")})
            self.form = {}
            self.message = None
            return True

        body = self.attempt("Update week", self.client.put, WEEKLY_URL, json={"id": self.editing_id, **week},
                            resource="weeks", inline=True)
        if body is None:
            return False
        self.store.update(self.editing_id, body.get("data") or week)
        self.reset_edit_mode()
        return True

    def reset_edit_mode(self):
        self.editing_id = None
        self.form = {}
        self.message = None

    def handle_table_click(self, action: str, week_id):
        if action == "delete":
            body = self.attempt("Delete week", self.client.delete, WEEKLY_URL, resource="weeks", id=week_id)
            if body is None:
                return False
            self.store.remove(week_id)
            if self.editing_id is not None and str(self.editing_id) == str(week_id):
                self.reset_edit_mode()
            return True

        if action == "edit":
            week = self.store.find(week_id)
            if week is None:
                return None
            self.editing_id = week["id"]
            self.form = {
                "title": html.unescape(week["title"]),
                "start_date": week["start_date"],
                "description": html.unescape(week["description"]),
                "links": "\n".join(week.get("links") or []),
            }
            return self.form
        return None
