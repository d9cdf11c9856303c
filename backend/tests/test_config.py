"""Unit tests for YAML settings loading and environment overrides."""

from pathlib import Path
import os
import sys
import tempfile
import unittest
from unittest.mock import patch


PROJECT_ROOT = Path(__file__).resolve().parents[2]
BACKEND_ROOT = PROJECT_ROOT / "backend"
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from core.config import load_settings, resolve_path


CONFIG_YAML = """
app:
  name: Test API
  debug: true
  host: 0.0.0.0
  port: 8100
  cors_origins:
    - http://a.example
    - http://b.example
models:
  churn_knn: /opt/models/knn.joblib
  churn_logreg: artifacts/logreg.joblib
prediction:
  use_fallback: false
  background_model_load: false
"""


class LoadSettingsTests(unittest.TestCase):
    """Validate precedence: environment, then YAML, then defaults."""

    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        self.config_path = Path(self._temp_dir.name) / "config.yml"
        self.config_path.write_text(CONFIG_YAML, encoding="utf-8")

    def tearDown(self) -> None:
        self._temp_dir.cleanup()

    def test_yaml_values(self) -> None:
        """Values from YAML are parsed and coerced."""
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings(str(self.config_path))
        self.assertEqual(settings.app_name, "Test API")
        self.assertTrue(settings.debug)
        self.assertEqual(settings.host, "0.0.0.0")
        self.assertEqual(settings.port, 8100)
        self.assertEqual(settings.cors_origins, ["http://a.example", "http://b.example"])
        self.assertFalse(settings.use_fallback)
        self.assertFalse(settings.background_model_load)

    def test_relative_paths_resolve_against_backend(self) -> None:
        """Relative artifact paths are anchored at the backend directory."""
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings(str(self.config_path))
        self.assertEqual(settings.churn_knn_model_path, str(Path("/opt/models/knn.joblib").resolve()))
        self.assertEqual(
            settings.churn_logreg_model_path, str((BACKEND_ROOT / "artifacts" / "logreg.joblib").resolve())
        )
        self.assertEqual(
            settings.credit_kmeans_model_path, str((BACKEND_ROOT / "models" / "credit_kmeans.joblib").resolve())
        )
        self.assertEqual(resolve_path("settings/segments.json"), settings.segment_catalog_path)

    def test_environment_overrides_yaml(self) -> None:
        """Environment variables take precedence over YAML values."""
        env = {
            "HOST": "10.0.0.5",
            "PORT": "9000",
            "CORS_ORIGIN": "http://x.example, http://y.example",
            "CREDIT_KMEANS_MODEL_PATH": "/srv/kmeans.joblib",
            "USE_FALLBACK": "yes",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings(str(self.config_path))
        self.assertEqual(settings.host, "10.0.0.5")
        self.assertEqual(settings.port, 9000)
        self.assertEqual(settings.cors_origins, ["http://x.example", "http://y.example"])
        self.assertEqual(settings.credit_kmeans_model_path, str(Path("/srv/kmeans.joblib").resolve()))
        self.assertTrue(settings.use_fallback)

    def test_use_fallback_only_disabled_by_false(self) -> None:
        """Only the literal value false disables the fallback."""
        for raw, expected in (("false", False), ("FALSE", False), ("0", True), ("no", True)):
            with self.subTest(raw=raw):
                with patch.dict(os.environ, {"USE_FALLBACK": raw}, clear=True):
                    self.assertIs(load_settings(str(self.config_path)).use_fallback, expected)

    def test_invalid_port_uses_default(self) -> None:
        """An unparsable port logs a warning and keeps the default."""
        with patch.dict(os.environ, {"PORT": "not-a-port"}, clear=True):
            with self.assertLogs("core.config", level="WARNING"):
                settings = load_settings(str(self.config_path))
        self.assertEqual(settings.port, 3000)

    def test_missing_file_uses_defaults(self) -> None:
        """Without a config file every setting has a default."""
        with patch.dict(os.environ, {}, clear=True):
            with self.assertLogs("core.config", level="WARNING"):
                settings = load_settings(str(Path(self._temp_dir.name) / "absent.yml"))
        self.assertEqual(settings.app_name, "Customer Prediction API")
        self.assertEqual(settings.port, 3000)
        self.assertTrue(settings.use_fallback)
        self.assertTrue(settings.background_model_load)
        self.assertEqual(settings.cors_origins, ["http://localhost:5173"])


if __name__ == "__main__":
    unittest.main()
