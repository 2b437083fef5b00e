from .base import Controller
from .rendering import render
from .store import Store
from .weekly_admin import WEEKLY_URL


class WeekDetailController(Controller):
    """One week with its links and discussion thread."""

    name = "week details"

    def __init__(self, client, week_id):
        super().__init__(client)
        self.week_id = week_id
        self.week = None
        # the primary store holds the comments of this week
        self.comments: Store = self.store

    def load(self):
        body = self.client.get(WEEKLY_URL, resource="weeks", id=self.week_id)
        self.week = body["data"]
        self.load_comments()

    def load_comments(self):
        body = self.client.get(WEEKLY_URL, resource="comments", week_id=self.week_id)
        self.comments.replace(body["data"])

    def events(self):
        return {"submit:comment": self.handle_add_comment}

    def render(self) -> str:
        return render("week_detail.html", week=self.week, comments=self.comments.items, message=self.message)

    def handle_add_comment(self, form: dict) -> bool:
        author = (form.get("author") or "").strip()
        text = (form.get("text") or "").strip()
        if not author or not text:
            self.show_message("Please enter your name and a comment.")
            return False

        payload = {"week_id": self.week_id, "author": author, "text": text}
        body = self.attempt("Post comment", self.client.post, WEEKLY_URL, json=payload, resource="comments")
        if body is None:
            return False
        self.message = None
        self.attempt("Reload comments", self.load_comments)
        return True
