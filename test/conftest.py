"""
Test configuration for fzbz tests
"""

import io
import sys
from pathlib import Path

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from interpreter import create_interpreter
from parsing import create_parser


@pytest.fixture
def parser():
  """Provide a fresh parser for each test"""
  return create_parser()


@pytest.fixture
def run_program():
  """Run source text and return (result value, captured stdout)"""
  def run(source):
    out = io.StringIO()
    interpreter = create_interpreter(stdout=out)
    value = interpreter.run_source(source)
    return value, out.getvalue()
  return run


@pytest.fixture
def examples_dir():
  return project_root / "examples"
