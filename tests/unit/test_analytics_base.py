"""
Coverage probe for linkpulse.analytics.base.BaseAnalytics.

Goal:
    Execute the base-class abstract method bodies (which raise
    NotImplementedError) via super() calls in a concrete subclass,
    so those lines are credited by coverage.
"""

import pytest

from linkpulse.analytics.analytics import Analytics
from linkpulse.analytics.base import BaseAnalytics
from linkpulse.storage.storage import Storage


class _ProbeAnalytics(BaseAnalytics):
    """Concrete test subclass that forwards to BaseAnalytics via super()."""

    def link_stats(self, code, today=None):
        return super().link_stats(code, today)

    def topic_stats(self, topic, today=None):
        return super().topic_stats(topic, today)

    def owner_stats(self, owner, today=None):
        return super().owner_stats(owner, today)


@pytest.mark.parametrize("method", ["link_stats", "topic_stats", "owner_stats"])
def test_base_methods_raise_not_implemented(method):
    with pytest.raises(NotImplementedError):
        getattr(_ProbeAnalytics(), method)("x")


def test_base_cannot_be_instantiated():
    with pytest.raises(TypeError):
        BaseAnalytics()


def test_storage_backed_analytics_is_a_base_analytics():
    assert isinstance(Analytics(Storage()), BaseAnalytics)
