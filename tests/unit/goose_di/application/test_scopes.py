"""Unit tests for scopes."""

import pytest

from goose_di.application.scopes import ScopeEntry, SimpleScope, SingletonScope, create_simple_scope
from goose_di.domain import ScopeMisuseError, key_for


class Counter:
    pass


def make_counting_provider():
    calls = []

    def provider(context, container):
        calls.append(context)
        return len(calls)

    return provider, calls


class TestSimpleScopeLifecycle:
    """Test cases for entering and exiting a SimpleScope."""

    def test_scope_starts_without_contexts(self):
        """Test that a new scope has no active contexts."""
        scope = SimpleScope()

        assert scope.active_contexts == 0
        assert scope.name == "SimpleScope"

    def test_enter_returns_entry(self):
        """Test that enter returns a ScopeEntry for the context."""
        scope = SimpleScope("Request")

        entry = scope.enter("ctx")

        assert isinstance(entry, ScopeEntry)
        assert entry.context == "ctx"
        assert scope.is_entered("ctx")
        assert scope.active_contexts == 1

    def test_exit_drops_context(self):
        """Test that exit leaves the context unentered."""
        scope = SimpleScope()
        scope.enter("ctx")

        scope.exit("ctx")

        assert not scope.is_entered("ctx")
        assert scope.active_contexts == 0

    def test_exit_without_enter_raises(self):
        """Test that exiting an unentered context raises."""
        scope = SimpleScope()

        with pytest.raises(ScopeMisuseError, match="Already out of context"):
            scope.exit("ctx")

    def test_enter_twice_raises(self):
        """Test that a context cannot be entered twice."""
        scope = SimpleScope()
        scope.enter("ctx")

        with pytest.raises(ScopeMisuseError):
            scope.enter("ctx")

    def test_entry_as_context_manager(self):
        """Test that the entry exits the scope at the end of a with block."""
        scope = SimpleScope()

        with scope.enter("ctx") as context:
            assert context == "ctx"
            assert scope.is_entered("ctx")

        assert not scope.is_entered("ctx")

    def test_entry_exits_on_exception(self):
        """Test that the scope is exited when the with block raises."""
        scope = SimpleScope()

        with pytest.raises(ValueError):
            with scope.enter("ctx"):
                raise ValueError("boom")

        assert not scope.is_entered("ctx")

    def test_entry_exit_method(self):
        """Test exiting through the entry handle."""
        scope = SimpleScope()
        entry = scope.enter("ctx")

        entry.exit()

        assert not scope.is_entered("ctx")

    def test_create_simple_scope(self):
        """Test the factory with and without a name."""
        assert create_simple_scope().name == "SimpleScope"
        assert create_simple_scope("HTTP Request").name == "HTTP Request"


class TestSimpleScopeCaching:
    """Test cases for values cached by a SimpleScope."""

    def test_same_value_within_context(self):
        """Test that repeated invocations within one context hit the cache."""
        scope = SimpleScope()
        provider, calls = make_counting_provider()
        scoped = scope.scope(key_for(Counter), provider)

        with scope.enter("ctx"):
            assert scoped("ctx", None) == 1
            assert scoped("ctx", None) == 1

        assert calls == ["ctx"]

    def test_fresh_value_after_reenter(self):
        """Test that exiting drops the cache."""
        scope = SimpleScope()
        provider, _ = make_counting_provider()
        scoped = scope.scope(key_for(Counter), provider)

        with scope.enter("first"):
            first = scoped("first", None)
        with scope.enter("second"):
            second = scoped("second", None)

        assert first != second

    def test_contexts_are_isolated(self):
        """Test that concurrently entered contexts keep separate caches."""
        scope = SimpleScope()
        provider, _ = make_counting_provider()
        scoped = scope.scope(key_for(Counter), provider)
        scope.enter("a")
        scope.enter("b")

        assert scoped("a", None) == 1
        assert scoped("b", None) == 2
        assert scoped("a", None) == 1

    def test_keys_are_isolated(self):
        """Test that two keys in one context do not share a cache slot."""
        scope = SimpleScope()
        scoped_int = scope.scope(key_for(int), lambda context, container: 1)
        scoped_str = scope.scope(key_for(str), lambda context, container: "foo")

        with scope.enter("ctx"):
            assert scoped_int("ctx", None) == 1
            assert scoped_str("ctx", None) == "foo"

    def test_owners_are_isolated(self):
        """Test that the same key wrapped for two owners caches two values."""
        scope = SimpleScope()
        first = scope.scope(key_for(int), lambda context, container: 1, owner="first")
        second = scope.scope(key_for(int), lambda context, container: 2, owner="second")

        with scope.enter("ctx"):
            assert first("ctx", None) == 1
            assert second("ctx", None) == 2

    def test_access_outside_scope_raises(self):
        """Test that a scoped provider fails for an unentered context."""
        scope = SimpleScope("Request")
        provider, calls = make_counting_provider()
        scoped = scope.scope(key_for(Counter), provider)

        with pytest.raises(ScopeMisuseError, match="outside of scope Request. 0 scopes are active"):
            scoped("ctx", None)

        assert calls == []

    def test_access_after_exit_raises(self):
        """Test that a cached value is unavailable after exit."""
        scope = SimpleScope()
        scoped = scope.scope(key_for(Counter), lambda context, container: 1)
        with scope.enter("ctx"):
            scoped("ctx", None)

        with pytest.raises(ScopeMisuseError):
            scoped("ctx", None)

    def test_provider_error_is_not_cached(self):
        """Test that a failing provider is retried on the next invocation."""
        scope = SimpleScope()
        attempts = []

        def provider(context, container):
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("first attempt fails")
            return "foo"

        scoped = scope.scope(key_for(str), provider)
        with scope.enter("ctx"):
            with pytest.raises(RuntimeError):
                scoped("ctx", None)
            assert scoped("ctx", None) == "foo"


class TestSingletonScope:
    """Test cases for SingletonScope."""

    def test_enter_raises(self):
        """Test that the singleton scope cannot be entered."""
        with pytest.raises(ScopeMisuseError, match="enter"):
            SingletonScope().enter("ctx")

    def test_exit_raises(self):
        """Test that the singleton scope cannot be exited."""
        with pytest.raises(ScopeMisuseError, match="exit"):
            SingletonScope().exit("ctx")

    def test_same_value_regardless_of_context(self):
        """Test that the cache is keyed by key alone."""
        scope = SingletonScope()
        provider, calls = make_counting_provider()
        scoped = scope.scope(key_for(Counter), provider)

        assert scoped("first", None) == 1
        assert scoped("second", None) == 1
        assert scoped(None, None) == 1
        assert calls == ["first"]

    def test_keys_are_isolated(self):
        """Test that each key gets its own singleton."""
        scope = SingletonScope()

        assert scope.scope(key_for(int), lambda context, container: 1)(None, None) == 1
        assert scope.scope(key_for(str), lambda context, container: "foo")(None, None) == "foo"

    def test_owners_are_isolated(self):
        """Test that the same key wrapped for two owners caches two values."""
        scope = SingletonScope()
        first = scope.scope(key_for(int), lambda context, container: 1, owner="first")
        second = scope.scope(key_for(int), lambda context, container: 2, owner="second")

        assert first(None, None) == 1
        assert second(None, None) == 2
