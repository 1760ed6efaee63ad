"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Minimum seconds between two scans of the same employee.
SCAN_COOLDOWN_SECONDS = 3

# Arriving this many minutes late (or more) counts as a half day.
HALF_DAY_THRESHOLD_MINUTES = 120

# Night-shift scans before this hour may close the previous night's record.
NIGHT_CONTINUATION_CUTOFF_HOUR = 12

DEFAULT_GRACE_MINUTES = 15
DEFAULT_LATE_THRESHOLD_MINUTES = 15
DEFAULT_DB_TIMEOUT_SECONDS = 5
# One worker keeps activity writes in submission order, so a photo back-fill
# always runs after the entry it targets.
DEFAULT_AUDIT_WORKERS = 1

# "type" field expected inside badge QR payloads.
DEFAULT_QR_PAYLOAD_TYPE = "KIOSK_ATTENDANCE"
