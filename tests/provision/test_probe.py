"""
Tests for the ordered probe — preference order, fallback, exhaustion.
"""

from geostack.core.models.resolution import Candidate, ranked
from geostack.core.services.provision.domain.probe import probe_first


class TestProbeFirst:
    def test_returns_first_accepted(self):
        tried = []

        def activator(c):
            tried.append(c.name)
            return c.name in ("b", "c")

        chosen = probe_first(ranked(["a", "b", "c"]), activator)
        assert chosen is not None
        assert chosen.name == "b"
        # stops at the first success
        assert tried == ["a", "b"]

    def test_rank_beats_list_order(self):
        candidates = [Candidate(name="late", rank=5), Candidate(name="early", rank=0)]
        chosen = probe_first(candidates, lambda c: True)
        assert chosen.name == "early"

    def test_ties_keep_list_order(self):
        candidates = [Candidate(name="x", rank=1), Candidate(name="y", rank=1)]
        assert probe_first(candidates, lambda c: True).name == "x"

    def test_none_when_all_rejected(self):
        assert probe_first(ranked(["a", "b"]), lambda c: False) is None

    def test_empty_list(self):
        assert probe_first([], lambda c: True) is None

    def test_oserror_counts_as_rejection(self):
        def activator(c):
            if c.name == "missing":
                raise FileNotFoundError("no such binary")
            return True

        chosen = probe_first(ranked(["missing", "present"]), activator)
        assert chosen.name == "present"

    def test_command_carried_through(self):
        candidates = [Candidate(name="python/3.11", rank=0, command="python3.11")]
        chosen = probe_first(candidates, lambda c: True)
        assert chosen.command == "python3.11"
