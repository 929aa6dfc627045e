"""
Tests for the navigation controller and destinations
"""

import random

import pytest
from unittest.mock import Mock

from services.errors import InvalidDestinationError
from services.navigation_service import (
    BOTTOM_NAV_ITEMS,
    HOME,
    LOGIN,
    PROFILE,
    REGISTER,
    SEARCH,
    SETTINGS,
    TEAM,
    Destination,
    NavigationController,
    Screen,
    post_detail,
)


class TestDestinations:
    """Test destination value objects"""

    def test_equality_by_value(self):
        assert Destination(Screen.HOME) == HOME
        assert post_detail("p1") == post_detail("p1")
        assert post_detail("p1") != post_detail("p2")
        assert hash(post_detail("p1")) == hash(post_detail("p1"))

    def test_post_detail_requires_post_id(self):
        with pytest.raises(InvalidDestinationError):
            Destination(Screen.POST_DETAIL)

    def test_plain_screens_reject_post_id(self):
        with pytest.raises(InvalidDestinationError):
            Destination(Screen.HOME, post_id="p1")

    def test_from_name(self):
        assert Destination.from_name("home") == HOME
        assert Destination.from_name(" Login ") == LOGIN

    def test_from_name_unknown(self):
        with pytest.raises(InvalidDestinationError):
            Destination.from_name("admin")

    def test_screen_metadata(self):
        assert BOTTOM_NAV_ITEMS == (HOME, SEARCH, TEAM, PROFILE)
        assert LOGIN.is_auth_screen and REGISTER.is_auth_screen
        assert not HOME.is_auth_screen
        assert SETTINGS.shows_bottom_nav
        assert not post_detail("p1").shows_bottom_nav
        assert HOME.title == "Feed"
        assert str(post_detail("p1")) == "post_detail/p1"


class TestNavigationController:
    """Test backstack transitions"""

    def test_initial_state(self):
        nav = NavigationController()

        assert nav.backstack == (LOGIN,)
        assert nav.current_destination == LOGIN
        assert nav.can_navigate_back is False

    def test_navigate_to_appends(self):
        nav = NavigationController()
        nav.navigate_to(HOME)

        assert nav.backstack == (LOGIN, HOME)
        assert nav.current_destination == HOME

    def test_navigate_to_allows_duplicates(self):
        nav = NavigationController()
        nav.navigate_to(HOME)
        nav.navigate_to(HOME)

        assert nav.backstack == (LOGIN, HOME, HOME)

    def test_back_navigation_scenario(self):
        """Login -> Home -> Profile, then back three times"""
        nav = NavigationController(root=LOGIN)
        nav.navigate_to(HOME)
        nav.navigate_to(PROFILE)

        assert nav.navigate_back() is True
        assert nav.current_destination == HOME
        assert nav.navigate_back() is True
        assert nav.current_destination == LOGIN
        assert nav.navigate_back() is False
        assert nav.current_destination == LOGIN

    def test_navigate_back_at_root_leaves_stack_unchanged(self):
        nav = NavigationController(root=HOME)

        assert nav.navigate_back() is False
        assert nav.backstack == (HOME,)

    def test_navigate_back_pops_exactly_one(self):
        nav = NavigationController()
        for destination in (HOME, SEARCH, post_detail("p1")):
            nav.navigate_to(destination)

        assert nav.navigate_back() is True
        assert nav.depth == 3
        assert nav.current_destination == SEARCH

    def test_navigate_to_root_collapses_history(self):
        nav = NavigationController()
        nav.navigate_to(REGISTER)
        nav.navigate_to(LOGIN)
        nav.navigate_to(PROFILE)

        nav.navigate_to_root(HOME)

        assert nav.backstack == (HOME,)
        assert nav.navigate_back() is False

    def test_invariant_holds_for_random_sequences(self):
        """current_destination is always the last backstack entry"""
        rng = random.Random(1234)
        destinations = [LOGIN, REGISTER, HOME, SEARCH, TEAM, PROFILE, SETTINGS, post_detail("p9")]
        nav = NavigationController()

        for _ in range(500):
            action = rng.choice(["to", "back", "root"])
            if action == "to":
                nav.navigate_to(rng.choice(destinations))
            elif action == "back":
                nav.navigate_back()
            else:
                nav.navigate_to_root(rng.choice(destinations))

            assert len(nav.backstack) >= 1
            assert nav.current_destination == nav.backstack[-1]

    def test_breadcrumbs(self):
        nav = NavigationController(root=HOME)
        nav.navigate_to(PROFILE)
        nav.navigate_to(SETTINGS)

        assert nav.breadcrumbs() == "Feed > Profile > Settings"


class TestNavigationSubscriptions:
    """Test state change notifications"""

    def test_listener_gets_consistent_snapshots(self):
        nav = NavigationController()
        listener = Mock()
        nav.subscribe(listener)

        nav.navigate_to(HOME)
        nav.navigate_back()
        nav.navigate_to_root(SEARCH)

        assert listener.call_count == 3
        for call in listener.call_args_list:
            state = call.args[0]
            assert state.current_destination == state.backstack[-1]
        assert listener.call_args.args[0].backstack == (SEARCH,)

    def test_failed_back_does_not_notify(self):
        nav = NavigationController()
        listener = Mock()
        nav.subscribe(listener)

        nav.navigate_back()

        listener.assert_not_called()

    def test_unsubscribe(self):
        nav = NavigationController()
        listener = Mock()
        nav.subscribe(listener)
        nav.unsubscribe(listener)

        nav.navigate_to(HOME)

        listener.assert_not_called()


class TestStartupPolicy:
    """Test the one-time start destination selection"""

    @pytest.mark.asyncio
    async def test_valid_session_starts_at_authenticated_root(self):
        nav = NavigationController(root=LOGIN, authenticated_root=HOME)

        async def check():
            return True

        assert await nav.start(check) == HOME
        assert nav.backstack == (HOME,)

    @pytest.mark.asyncio
    async def test_no_session_stays_at_root(self):
        nav = NavigationController(root=LOGIN)

        assert await nav.start(lambda: False) == LOGIN
        assert nav.backstack == (LOGIN,)

    @pytest.mark.asyncio
    async def test_start_runs_once(self):
        nav = NavigationController()
        check = Mock(return_value=False)

        await nav.start(check)
        await nav.start(Mock(return_value=True))

        check.assert_called_once()
        assert nav.current_destination == LOGIN

    @pytest.mark.asyncio
    async def test_disposed_before_check_completes(self):
        """A late result is discarded once the controller is disposed"""
        nav = NavigationController()

        async def check():
            nav.dispose()
            return True

        assert await nav.start(check) == LOGIN
        assert nav.backstack == (LOGIN,)
