import warnings

# google-api-core emits FutureWarning about interpreter support on import,
# which is noise for a library embedded in a long-running controller.
warnings.filterwarnings("ignore", category=FutureWarning, module="google.api_core")
warnings.filterwarnings("ignore", category=FutureWarning, module="google.cloud")

from .gce.cloud import GCECloud, new_gce_cloud  # noqa: E402
from .registry import get_cloud_provider, register_cloud_provider  # noqa: E402

__all__ = [
    "GCECloud",
    "get_cloud_provider",
    "new_gce_cloud",
    "register_cloud_provider",
]
