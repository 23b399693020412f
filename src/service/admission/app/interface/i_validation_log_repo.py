from abc import ABC, abstractmethod

from src.service.admission.domain.entity.validation_log_entry import ValidationLogEntry


class IValidationLogRepo(ABC):
    @abstractmethod
    async def append(self, *, entry: ValidationLogEntry) -> None:
        """Insert one audit entry. Entries are never updated or deleted."""
        pass
