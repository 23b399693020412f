from abc import ABC, abstractmethod

from src.service.admission.domain.value_object.validation_policy import ValidationPolicy


class IValidationPolicyProvider(ABC):
    @abstractmethod
    async def get_validation_policy(self) -> ValidationPolicy:
        """Return the active policy snapshot. Must not raise; falls back to defaults."""
        pass
