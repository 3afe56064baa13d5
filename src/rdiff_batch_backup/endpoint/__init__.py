# pyright: standard

"""rdiff-batch-backup: rdiff_batch_backup/endpoint/__init__.py."""

from ..__logger__ import logger
from ..detection import SourceKind

from .common import Endpoint, acquired
from .dataset import DatasetEndpoint
from .local import LocalEndpoint
from .lvm import LogicalVolumeEndpoint, SnapshotHandle

ENDPOINT_CLASSES = {
    SourceKind.DATASET: DatasetEndpoint,
    SourceKind.LOGICAL_VOLUME: LogicalVolumeEndpoint,
    SourceKind.DIRECTORY: LocalEndpoint,
}


def choose_endpoint(kind, source, config=None) -> Endpoint:
    """
    Chooses the endpoint handling the given kind of source.

    Args:
        kind (SourceKind): The resolved storage kind of the source.
        source (str): The source identifier from the task.
        config (SnapshotConfig): Snapshot settings passed to the endpoint.

    Returns:
        Endpoint: An instance of the matching `Endpoint` subclass.

    Raises:
        ValueError: If no endpoint handles the given kind.
    """
    try:
        endpoint_class = ENDPOINT_CLASSES[kind]
    except KeyError:
        raise ValueError(f"No endpoint handles source kind: {kind!r}")
    endpoint = endpoint_class(source, config=config)
    logger.debug("Endpoint created: %r", endpoint)
    return endpoint


__all__ = [
    "Endpoint",
    "DatasetEndpoint",
    "LocalEndpoint",
    "LogicalVolumeEndpoint",
    "SnapshotHandle",
    "acquired",
    "choose_endpoint",
]
