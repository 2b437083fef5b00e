from .base import Controller
from .rendering import render
from .weekly_admin import WEEKLY_URL


class WeekListController(Controller):
    """Public list of weeks, one card each, linking to the details page."""

    name = "week list"

    def load(self):
        body = self.client.get(WEEKLY_URL, resource="weeks")
        self.store.replace(body["data"])

    def render(self) -> str:
        return render("week_cards.html", weeks=self.store.items)
