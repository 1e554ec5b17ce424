"""
Pytest configuration for schema tests.

Schema tests only need settings for the content length limit. Pin it so a
local .env or environment cannot change what the tests expect.
"""
import os

# Set before any imports that might trigger Settings validation
os.environ.setdefault("MAX_NOTE_CONTENT_LENGTH", "100000")
