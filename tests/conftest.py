"""Root conftest — shared test configuration."""

import os
import tempfile

# Keep a developer's codemode-config.json from leaking into test settings
os.environ.setdefault(
    "CODEMODE_CONFIG_FILE",
    os.path.join(tempfile.gettempdir(), "codemode-test-missing-config.json"),
)
