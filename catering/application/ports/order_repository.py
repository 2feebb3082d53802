from abc import ABC, abstractmethod

from catering.domain.entities.user import User


class OrderRepositoryPort(ABC):
    @abstractmethod
    def get_recent_orders(self, limit: int = 10) -> list[User]:
        """Users with a confirmed lunch, newest order first."""
        raise NotImplementedError

    @abstractmethod
    def upsert_order(self, user: User) -> None:
        raise NotImplementedError
