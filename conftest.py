"""Configure test suite environment"""
import os
import sys

# Make the sensitrack package importable without installing it
project_root = os.path.abspath(os.path.dirname(__file__))
sys.path.insert(0, project_root)

# Powertools must not try to reach X-Ray or the real table from tests
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "sensitrack")
os.environ.setdefault("TRACKER_TABLE_NAME", "TrackerTable-test")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
