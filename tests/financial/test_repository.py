"""Tests for felosy.financial.repository."""

import threading

import pytest

from felosy.core.exceptions import PortfolioError, ValidationError
from felosy.financial.repository import PortfolioRepository


class TestPortfolioRepository:
    def test_create_and_get(self):
        repo = PortfolioRepository()
        portfolio = repo.create("alice")
        assert repo.get(portfolio.portfolio_id) is portfolio
        assert len(repo) == 1

    def test_duplicate_id(self):
        repo = PortfolioRepository()
        repo.create("alice", portfolio_id="p1")
        with pytest.raises(PortfolioError):
            repo.create("bob", portfolio_id="p1")

    def test_get_missing(self):
        assert PortfolioRepository().get("nope") is None

    def test_get_or_create(self):
        repo = PortfolioRepository()
        first = repo.get_or_create("alice")
        assert repo.get_or_create("alice") is first
        assert repo.get_or_create("bob") is not first
        assert len(repo) == 2

    def test_get_or_create_strips_owner(self):
        repo = PortfolioRepository()
        first = repo.get_or_create(" alice ")
        assert first.owner_id == "alice"
        assert repo.get_or_create(" alice ") is first
        assert repo.get_or_create("alice") is first
        assert len(repo) == 1

    @pytest.mark.parametrize("owner", ["", "   ", None])
    def test_get_or_create_rejects_empty_owner(self, owner):
        repo = PortfolioRepository()
        with pytest.raises(ValidationError):
            repo.get_or_create(owner)
        assert len(repo) == 0

    def test_list_for_owner_strips_owner(self):
        repo = PortfolioRepository()
        repo.create("alice")
        assert len(repo.list_for_owner("  alice")) == 1

    def test_list_for_owner(self):
        repo = PortfolioRepository()
        repo.create("alice")
        repo.create("alice")
        repo.create("bob")
        assert len(repo.list_for_owner("alice")) == 2
        assert repo.list_for_owner("carol") == []

    def test_remove(self):
        repo = PortfolioRepository()
        portfolio = repo.create("alice")
        assert repo.remove(portfolio.portfolio_id) is True
        assert repo.remove(portfolio.portfolio_id) is False
        assert len(repo) == 0

    def test_repositories_are_independent(self):
        a, b = PortfolioRepository(), PortfolioRepository()
        a.create("alice")
        assert len(b) == 0

    def test_concurrent_get_or_create(self):
        repo = PortfolioRepository()
        results = []

        def worker():
            results.append(repo.get_or_create("alice"))

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(repo) == 1
        assert all(p is results[0] for p in results)
