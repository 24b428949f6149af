"""Session-scoped, in-memory store of portfolios keyed by id and owner."""

from __future__ import annotations

import threading

from loguru import logger

from felosy.core.exceptions import PortfolioError

from .portfolio import Portfolio, owner_key


class PortfolioRepository:
    """Thread-safe registry of the portfolios open in one session.

    Passed explicitly to whoever needs it; there is no module-level instance.
    """

    def __init__(self):
        self._portfolios: dict[str, Portfolio] = {}
        self._lock = threading.Lock()

    def create(self, owner_id: str, portfolio_id: str | None = None) -> Portfolio:
        portfolio = Portfolio(owner_id, portfolio_id)
        with self._lock:
            if portfolio.portfolio_id in self._portfolios:
                raise PortfolioError(f"Portfolio {portfolio.portfolio_id} already exists")
            self._portfolios[portfolio.portfolio_id] = portfolio
        logger.info(f"Created portfolio {portfolio.portfolio_id} for {portfolio.owner_id}")
        return portfolio

    def get(self, portfolio_id: str) -> Portfolio | None:
        with self._lock:
            return self._portfolios.get(portfolio_id)

    def get_or_create(self, owner_id: str) -> Portfolio:
        """The owner's first portfolio, creating one if they have none."""
        owner_id = owner_key(owner_id)
        with self._lock:
            for portfolio in self._portfolios.values():
                if portfolio.owner_id == owner_id:
                    return portfolio
            portfolio = Portfolio(owner_id)
            self._portfolios[portfolio.portfolio_id] = portfolio
        logger.info(f"Created portfolio {portfolio.portfolio_id} for {owner_id}")
        return portfolio

    def list_for_owner(self, owner_id: str) -> list[Portfolio]:
        owner_id = owner_key(owner_id)
        with self._lock:
            return [p for p in self._portfolios.values() if p.owner_id == owner_id]

    def remove(self, portfolio_id: str) -> bool:
        with self._lock:
            removed = self._portfolios.pop(portfolio_id, None)
        if removed is not None:
            logger.info(f"Removed portfolio {portfolio_id}")
        return removed is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._portfolios)
