"""Shared fixtures for wizardflow tests."""

import pytest

NEW_SERVICE_FLOW = """
name: new-service
version: "1.0"
description: Settings for a new service
steps:
  - id: service-name
    kind: text
    name: Service name
    default_value: api
  - id: language
    kind: single
    name: Language
    select_items:
      - name: Python
        value: python
      - name: Go
        value: go
  - id: features
    kind: multi
    name: Features
    select_items:
      - {name: Metrics, value: metrics}
      - {name: Tracing, value: tracing}
      - {name: Legacy, value: legacy, enabled: false}
  - id: target
    kind: path
    name: Target directory
"""


@pytest.fixture
def base_dir(tmp_path):
    """Base directory with a flows/ directory holding one flow."""
    flows = tmp_path / "flows"
    flows.mkdir()
    (flows / "new-service.yaml").write_text(NEW_SERVICE_FLOW)
    return tmp_path
