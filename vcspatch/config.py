"""Global configuration: constants shared across the package."""

# Rendering used in place of secret values in diffs and reports
SECRET_MASK = "******"

# Auth descriptor fields whose values are treated as secrets
SECRET_FIELDS = frozenset({"password", "passphrase"})

# Audit actions recorded by the registry
ACTION_PATCH_APPLIED = "patch_applied"
ACTION_DRIFT_DETECTED = "drift_detected"
ACTION_PATCH_REJECTED = "patch_rejected"

# Default location of project-level settings
SETTINGS_DIR = ".vcspatch"
SETTINGS_FILE = "config.json"
