from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from config import Settings, settings as default_settings
from schemas.relay import DeliveryEncoding, PayloadMode, RelayMode


def _frozen(d: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(d or {}))


@dataclass(frozen=True)
class RelayConfig:
    """Read-only snapshot of the relay configuration, taken once at startup."""

    endpoint_url: Optional[str] = None
    relay_mode: RelayMode = RelayMode.PREVIEW
    payload_mode: PayloadMode = PayloadMode.FLAT
    encoding: DeliveryEncoding = DeliveryEncoding.FORM
    two_stage: bool = False
    operator_email: Optional[str] = None
    field_map: Mapping[str, str] = field(default_factory=lambda: _frozen(None))
    static_fields: Mapping[str, Any] = field(default_factory=lambda: _frozen(None))
    headers: Mapping[str, str] = field(default_factory=lambda: _frozen(None))

    def __post_init__(self) -> None:
        for name in ("field_map", "static_fields", "headers"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, _frozen(value))

    @classmethod
    def from_settings(cls, s: Settings) -> "RelayConfig":
        return cls(
            endpoint_url=s.privatelender_endpoint_url,
            relay_mode=s.relay_mode,
            payload_mode=s.privatelender_payload_mode,
            encoding=s.privatelender_content_type,
            two_stage=s.privatelender_two_stage,
            operator_email=s.injected_email,
            field_map=s.privatelender_field_map_json,
            static_fields=s.privatelender_static_fields_json,
            headers=s.privatelender_headers_json,
        )


relay_config = RelayConfig.from_settings(default_settings)


def get_relay_config() -> RelayConfig:
    """FastAPI dependency; overridden in tests."""
    return relay_config
