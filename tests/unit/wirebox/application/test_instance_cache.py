"""Unit tests for InstanceCache."""

import pytest

from wirebox.application.instance_cache import InstanceCache
from wirebox.domain import IInstanceCache


class TestInstanceCache:
    """Test cases for cached instances."""

    def test_implements_interface(self):
        assert isinstance(InstanceCache(), IInstanceCache)

    def test_put_and_get(self):
        cache = InstanceCache()
        instance = object()

        cache.put("mailer", instance)

        assert cache.has("mailer")
        assert cache.get("mailer") is instance

    def test_get_missing_raises(self):
        with pytest.raises(KeyError):
            InstanceCache().get("mailer")

    def test_cached_none_is_present(self):
        """Test that a cached None still counts as an instance."""
        cache = InstanceCache()
        cache.put("nothing", None)
        assert cache.has("nothing")

    def test_forget(self):
        cache = InstanceCache()
        cache.put("mailer", object())

        cache.forget("mailer")
        cache.forget("never-cached")

        assert not cache.has("mailer")

    def test_clear_keeps_resolved_flags(self):
        cache = InstanceCache()
        cache.put("mailer", object())
        cache.mark_resolved("mailer")

        cache.clear()

        assert not cache.has("mailer")
        assert cache.was_resolved("mailer")

    def test_instances_copy(self):
        cache = InstanceCache()
        cache.put("mailer", 1)

        copy = cache.get_instances_copy()
        copy["other"] = 2

        assert not cache.has("other")


class TestResolvedFlags:
    """Test cases for sticky resolved flags."""

    def test_mark_and_check(self):
        cache = InstanceCache()
        assert not cache.was_resolved("mailer")

        cache.mark_resolved("mailer")

        assert cache.was_resolved("mailer")

    def test_flag_survives_forget(self):
        cache = InstanceCache()
        cache.put("mailer", object())
        cache.mark_resolved("mailer")

        cache.forget("mailer")

        assert cache.was_resolved("mailer")

    def test_unmark_and_clear(self):
        cache = InstanceCache()
        cache.mark_resolved("a")
        cache.mark_resolved("b")

        cache.unmark_resolved("a")
        assert not cache.was_resolved("a")
        assert cache.was_resolved("b")

        cache.clear_resolved()
        assert not cache.was_resolved("b")
