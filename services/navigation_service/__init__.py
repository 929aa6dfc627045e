"""
Navigation service - destinations and the backstack controller.
"""

from .destinations import (
    Screen,
    Destination,
    post_detail,
    LOGIN,
    REGISTER,
    HOME,
    SEARCH,
    TEAM,
    PROFILE,
    SETTINGS,
    BOTTOM_NAV_ITEMS,
)
from .navigation_controller import NavigationController, NavigationState

__all__ = [
    'Screen',
    'Destination',
    'post_detail',
    'LOGIN',
    'REGISTER',
    'HOME',
    'SEARCH',
    'TEAM',
    'PROFILE',
    'SETTINGS',
    'BOTTOM_NAV_ITEMS',
    'NavigationController',
    'NavigationState',
]
