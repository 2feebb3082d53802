from abc import ABC, abstractmethod


class RecognizerPort(ABC):
    @abstractmethod
    def validate_entree(self, text: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def validate_drink(self, text: str) -> bool:
        raise NotImplementedError
