from src.service.admission.domain.value_object.scan_payload import ScanPayload
from src.service.admission.domain.value_object.validation_policy import ValidationPolicy


__all__ = ['ScanPayload', 'ValidationPolicy']
