from schemas.relay import DeliveryEncoding, PayloadMode, RelayMode, RelayResult
from schemas.submission import SubmissionData, SubmissionUpdate

__all__ = [
    "DeliveryEncoding",
    "PayloadMode",
    "RelayMode",
    "RelayResult",
    "SubmissionData",
    "SubmissionUpdate",
]
