"""
Navigation destinations - the closed set of screens the client can show.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from services.errors import InvalidDestinationError


class Screen(Enum):
    """Screen identifiers"""
    LOGIN = "login"
    REGISTER = "register"
    HOME = "home"
    SEARCH = "search"
    TEAM = "team"
    PROFILE = "profile"
    SETTINGS = "settings"
    POST_DETAIL = "post_detail"


SCREEN_TITLES = {
    Screen.LOGIN: "Login",
    Screen.REGISTER: "Register",
    Screen.HOME: "Feed",
    Screen.SEARCH: "Search",
    Screen.TEAM: "Teams",
    Screen.PROFILE: "Profile",
    Screen.SETTINGS: "Settings",
    Screen.POST_DETAIL: "Post",
}

AUTH_SCREENS = frozenset({Screen.LOGIN, Screen.REGISTER})


@dataclass(frozen=True)
class Destination:
    """
    Immutable screen address, compared by value.

    Only POST_DETAIL carries a parameter (the post id).
    """
    screen: Screen
    post_id: Optional[str] = None

    def __post_init__(self):
        if self.screen is Screen.POST_DETAIL:
            if not self.post_id:
                raise InvalidDestinationError("PostDetail requires a post id")
        elif self.post_id is not None:
            raise InvalidDestinationError(f"{self.screen.name} does not take a post id")

    @property
    def title(self) -> str:
        return SCREEN_TITLES[self.screen]

    @property
    def is_auth_screen(self) -> bool:
        """Auth screens hide the top bar"""
        return self.screen in AUTH_SCREENS

    @property
    def shows_bottom_nav(self) -> bool:
        return self in BOTTOM_NAV_ITEMS or self == SETTINGS

    @classmethod
    def from_name(cls, name: str) -> 'Destination':
        """Resolve a parameterless destination by screen name (e.g. "home")"""
        try:
            screen = Screen(name.strip().lower())
        except ValueError:
            raise InvalidDestinationError(f"Unknown destination: {name}") from None
        return cls(screen)

    def __str__(self) -> str:
        if self.post_id is not None:
            return f"{self.screen.value}/{self.post_id}"
        return self.screen.value


def post_detail(post_id: str) -> Destination:
    return Destination(Screen.POST_DETAIL, post_id)


LOGIN = Destination(Screen.LOGIN)
REGISTER = Destination(Screen.REGISTER)
HOME = Destination(Screen.HOME)
SEARCH = Destination(Screen.SEARCH)
TEAM = Destination(Screen.TEAM)
PROFILE = Destination(Screen.PROFILE)
SETTINGS = Destination(Screen.SETTINGS)

BOTTOM_NAV_ITEMS: Tuple[Destination, ...] = (HOME, SEARCH, TEAM, PROFILE)
