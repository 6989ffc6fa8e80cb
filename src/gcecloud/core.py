# Compute Engine REST base used to build resource self-links.
COMPUTE_API_BASE = "https://www.googleapis.com/compute/v1"

# Metadata server endpoint that reports "projects/<project>/zones/<zone>"
METADATA_ZONE_URL = "http://metadata.google.internal/computeMetadata/v1/instance/zone"
METADATA_HEADERS = {"Metadata-Flavor": "Google"}
METADATA_TIMEOUT = 5.0

# Region operation polling.
# The first status query happens only after one interval has elapsed.
OPERATION_POLL_INTERVAL = 10.0
OPERATION_TIMEOUT = 15 * 60.0
OPERATION_DONE = "DONE"

LOAD_BALANCER_PROTOCOL = "TCP"
