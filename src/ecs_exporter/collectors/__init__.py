from .batch_describer import DESCRIBE_BATCH_SIZE, describe_details
from .cluster_collector import ClusterCollector
from .pagination import list_identifiers

__all__ = [
    "ClusterCollector",
    "DESCRIBE_BATCH_SIZE",
    "describe_details",
    "list_identifiers",
]
