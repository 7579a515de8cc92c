"""Default settings for oauth-flow-engine.

Maps to keys in config.example.yaml. Override via config.local.yaml.
"""

from pathlib import Path

from platformdirs import user_data_dir

PACKAGE_DIR = Path(__file__).parent

# Definitions shipped with the package
bundled_definitions_dir = PACKAGE_DIR / "definitions"

# Platform-appropriate directory for user-edited definitions (resolved by platformdirs)
data_dir = Path(user_data_dir("oauth-flow-engine"))
user_definitions_dir = data_dir / "definitions"

# Server defaults
server_host = "127.0.0.1"
server_port = 3000

# Storage defaults
storage_mode = "file"  # "file" or "memory"

log_level = "INFO"
