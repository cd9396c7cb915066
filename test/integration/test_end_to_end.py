#!/usr/bin/env python3
"""
End-to-end integration tests for the cai2tf converter
"""

import unittest
import sys
import os
import tempfile
import shutil
import json
from pathlib import Path

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../../src'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../fixtures'))

from cai_terraform_converter.assets import load_assets
from cai_terraform_converter.config import ToolConfig
from cai_terraform_converter.conversion import create_engine
from sample_assets import ALL_ASSETS


EXPECTED_DOCUMENT = """# Generated by cai2tf

resource "google_project" "example-project" {
  billing_account = "012345-567890-ABCDEF"
  labels = {
    env  = "test"
    team = "platform"
  }
  name       = "Example Project"
  number     = "123456789"
  org_id     = "987654321"
  project_id = "example-project"
}

resource "google_compute_forwarding_rule" "test-rule" {
  allow_global_access = true
  backend_service     = "projects/example-project/regions/us-central1/backendServices/bs"
  ip_address          = "10.0.0.5"
  ip_protocol         = "TCP"
  labels = {
    app = "web"
  }
  load_balancing_scheme = "INTERNAL"
  name                  = "test-rule"
  network               = "projects/example-project/global/networks/default"
  ports                 = ["443", "80"]
  project               = "example-project"
  region                = "us-central1"
  service_directory_registrations {
    namespace = "ns"
    service   = "svc"
  }
}

resource "google_compute_health_check" "hc-1" {
  check_interval_sec = 5
  healthy_threshold  = 2
  http_health_check {
    port         = 80
    proxy_header = "NONE"
    request_path = "/healthz"
  }
  log_config {
    enable = true
  }
  name                = "hc-1"
  project             = "example-project"
  timeout_sec         = 5
  unhealthy_threshold = 2
}
"""


class TestEndToEndConversion(unittest.TestCase):
    """End-to-end integration tests"""

    def setUp(self):
        """Set up test environment"""
        self.temp_dir = tempfile.mkdtemp()
        self.input_file = Path(self.temp_dir) / "assets.jsonl"
        self.input_file.write_text("\n".join(json.dumps(record) for record in ALL_ASSETS))

    def tearDown(self):
        """Clean up test environment"""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_complete_conversion(self):
        """Test converting an export file into a Terraform document"""
        assets = load_assets(self.input_file)
        result = create_engine(ToolConfig()).convert_with_summary(assets)

        self.assertEqual(result.document, EXPECTED_DOCUMENT)
        self.assertEqual(result.skipped_assets, ["//storage.googleapis.com/example-bucket"])

    def test_parallel_conversion_is_deterministic(self):
        """Test that concurrent group conversion gives the sequential document"""
        config = ToolConfig()
        config.conversion.max_workers = 4
        engine = create_engine(config)
        assets = load_assets(self.input_file)

        for _ in range(5):
            self.assertEqual(engine.convert(assets), EXPECTED_DOCUMENT)

    def test_engine_is_reusable(self):
        """Test that one engine serves repeated runs"""
        engine = create_engine(ToolConfig())
        assets = load_assets(self.input_file)

        self.assertEqual(engine.convert(assets), engine.convert(assets))

    def test_extra_schema_directory(self):
        """Test that user schemas override bundled ones"""
        schema_dir = Path(self.temp_dir) / "schemas"
        schema_dir.mkdir()
        (schema_dir / "project.yaml").write_text(
            "google_project:\n"
            "  project_id:\n    type: string\n"
            "  name:\n    type: string\n"
            "  org_id:\n    type: string\n"
            "  folder_id:\n    type: string\n"
            "  billing_account:\n    type: string\n"
            "  labels:\n    type: map\n    elem:\n      type: string\n"
            "  number:\n    type: int\n"
        )

        config = ToolConfig()
        config.conversion.services = ["resourcemanager"]
        config.conversion.schema_paths = [str(schema_dir)]
        config.output.header_comment = None

        document = create_engine(config).convert(load_assets(self.input_file))

        self.assertTrue(document.startswith('resource "google_project"'))
        self.assertIn('number     = 123456789\n', document)


if __name__ == '__main__':
    unittest.main()
