"""
Settings and the relay configuration snapshot.
Run from the project root: python -m pytest tests/test_config.py -v
"""
import os
import unittest
from unittest.mock import patch

import support  # noqa: F401

from config import load_settings
from schemas.relay import DeliveryEncoding, PayloadMode, RelayMode
from services.errors import ConfigurationError
from services.relay_config import RelayConfig


def _env(**values):
    return patch.dict(os.environ, values)


class TestSettings(unittest.TestCase):
    def test_relay_values_from_environment(self):
        with _env(
            RELAY_MODE="SUBMIT",
            PRIVATELENDER_ENDPOINT_URL="https://lender.example/intake",
            PRIVATELENDER_PAYLOAD_MODE="Intake-Form-Update",
            PRIVATELENDER_CONTENT_TYPE="json",
            PRIVATELENDER_TWO_STAGE="true",
            PRIVATELENDER_FIELD_MAP_JSON='{"firstName": "fname"}',
            PRIVATELENDER_STATIC_FIELDS_JSON='{"source": "portal", "version": 2}',
            PRIVATELENDER_HEADERS_JSON='{"x-api-key": "k1"}',
            INJECTED_EMAIL="relay@operator.example",
        ):
            s = load_settings()
        self.assertIs(s.relay_mode, RelayMode.SUBMIT)
        self.assertIs(s.privatelender_payload_mode, PayloadMode.INTAKE_FORM_UPDATE)
        self.assertIs(s.privatelender_content_type, DeliveryEncoding.JSON)
        self.assertTrue(s.privatelender_two_stage)
        self.assertEqual(s.privatelender_field_map_json, {"firstName": "fname"})
        self.assertEqual(s.privatelender_static_fields_json, {"source": "portal", "version": 2})
        self.assertEqual(s.privatelender_headers_json, {"x-api-key": "k1"})
        self.assertEqual(s.injected_email, "relay@operator.example")

    def test_legacy_payload_mode_name(self):
        with _env(PRIVATELENDER_PAYLOAD_MODE="surecap-intake-form-update"):
            s = load_settings()
        self.assertIs(s.privatelender_payload_mode, PayloadMode.INTAKE_FORM_UPDATE)

    def test_relay_email_fallback(self):
        env = {k: v for k, v in os.environ.items() if k != "INJECTED_EMAIL"}
        env["RELAY_EMAIL"] = "fallback@operator.example"
        with patch.dict(os.environ, env, clear=True):
            s = load_settings()
        self.assertEqual(s.injected_email, "fallback@operator.example")

    def test_blank_values_are_unset(self):
        with _env(INJECTED_EMAIL="  ", ADMIN_TOKEN="", PRIVATELENDER_ENDPOINT_URL=""):
            s = load_settings()
        self.assertIsNone(s.injected_email)
        self.assertIsNone(s.admin_token)
        self.assertIsNone(s.privatelender_endpoint_url)

    def test_malformed_json_fails_at_load(self):
        with _env(PRIVATELENDER_FIELD_MAP_JSON="{not json"):
            with self.assertRaises(ConfigurationError):
                load_settings()

    def test_unknown_mode_fails_at_load(self):
        with _env(RELAY_MODE="sometimes"):
            with self.assertRaises(ConfigurationError):
                load_settings()

    def test_overrides(self):
        s = load_settings(admin_token="secret", environment="Production")
        self.assertEqual(s.admin_token, "secret")
        self.assertTrue(s.is_production)

    def test_sqlite_detection(self):
        self.assertTrue(load_settings(database_url="sqlite+aiosqlite://").is_sqlite)
        self.assertFalse(load_settings(database_url="postgresql+asyncpg://u:p@db/intake").is_sqlite)


class TestRelayConfig(unittest.TestCase):
    def test_from_settings(self):
        s = load_settings(
            privatelender_endpoint_url="https://lender.example/intake",
            relay_mode="submit",
            privatelender_field_map_json={"firstName": "fname"},
            injected_email="relay@operator.example",
        )
        config = RelayConfig.from_settings(s)
        self.assertEqual(config.endpoint_url, "https://lender.example/intake")
        self.assertIs(config.relay_mode, RelayMode.SUBMIT)
        self.assertEqual(config.operator_email, "relay@operator.example")
        self.assertEqual(dict(config.field_map), {"firstName": "fname"})
        self.assertEqual(dict(config.headers), {})

    def test_snapshot_is_read_only(self):
        source = {"source": "portal"}
        config = RelayConfig(static_fields=source)
        source["source"] = "changed"
        self.assertEqual(config.static_fields["source"], "portal")
        with self.assertRaises(TypeError):
            config.static_fields["source"] = "x"
        with self.assertRaises(AttributeError):
            config.endpoint_url = "https://elsewhere.example"


if __name__ == "__main__":
    unittest.main()
