"""
Router — the navigation shell shared by the web UI and the bot.

Maps the two logical routes to the two views and performs the
transitions they request:
  - ENTRY → RESULTS carries the city; the router stores it in the
    session under SESSION_KEY (the only write to session storage)
  - leaving RESULTS deactivates the result view, so a fetch that is
    still in flight cannot update it
  - activating RESULTS reads the pending city from the session again

The session is any mutable mapping: Flask's ``session`` for the web UI,
``context.user_data`` for a Telegram chat.
"""

from __future__ import annotations
import logging
from typing import MutableMapping, Optional

from models import ViewState
from views import ENTRY, RESULTS, EntryView, Fetch, ResultView, Transition

log = logging.getLogger(__name__)

SESSION_KEY = "city"


class Router:
    def __init__(self, session: MutableMapping, fetch: Optional[Fetch] = None):
        self.session = session
        self.entry = EntryView(self.navigate)
        self.result = ResultView(self.navigate, fetch)
        self.current = ENTRY
        self.last_transition: Optional[Transition] = None

    def navigate(self, transition: Transition):
        """Perform a transition requested by either view."""
        if transition.route not in (ENTRY, RESULTS):
            raise ValueError(f"Unknown route: {transition.route}")
        if transition.city is not None:
            self.session[SESSION_KEY] = transition.city
        if self.current == RESULTS and transition.route != RESULTS:
            self.result.deactivate()
        log.debug(f"Navigate {self.current} → {transition.route}")
        self.current = transition.route
        self.last_transition = transition

    @property
    def pending_city(self) -> Optional[str]:
        return self.session.get(SESSION_KEY)

    async def submit(self, raw_input: Optional[str]) -> Optional[ViewState]:
        """
        Entry view submission followed by the result view activation.
        Returns None when validation failed (entry.error holds why) or
        when the fetch result was discarded.
        """
        if not self.entry.submit(raw_input):
            return None
        return await self.open_results()

    async def open_results(self) -> Optional[ViewState]:
        """Activate the result view; a missing city sends us back to ENTRY."""
        self.current = RESULTS
        return await self.result.activate(self.pending_city)

    def back(self):
        self.result.go_back()
