"""
Test configuration for Letfun interpreter tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from interpreter import make_runtime_env


@pytest.fixture
def env():
  """Provide a fresh root environment for each test"""
  return make_runtime_env()


@pytest.fixture
def events():
  """Collect trace events as (step, description, value) tuples"""
  return []


@pytest.fixture
def recorder(events):
  """Observer that appends every trace event to the events fixture"""
  def record(step, description, value):
    events.append((step, description, value))
  return record
