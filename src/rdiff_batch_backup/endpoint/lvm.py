# pyright: standard

"""rdiff-batch-backup: rdiff_batch_backup/endpoint/lvm.py
Back up LVM logical volumes through a transient, mounted snapshot.
"""

from dataclasses import dataclass
from pathlib import Path

from rdiff_batch_backup import __util__
from rdiff_batch_backup.__logger__ import logger

from .common import Endpoint


@dataclass
class SnapshotHandle:
    """Everything needed to tear down one snapshot again."""

    vg_name: str
    lv_name: str
    snapshot_name: str
    snapshot_size: str
    device_path: Path
    mount_path: Path
    created: bool = False
    mount_dir_created: bool = False
    mounted: bool = False

    @property
    def lvm_name(self) -> str:
        return f"{self.vg_name}/{self.snapshot_name}"


class LogicalVolumeEndpoint(Endpoint):
    """Snapshot a logical volume and expose the snapshot as a mounted path."""

    def __init__(self, source, config=None) -> None:
        super().__init__(source, config=config)
        self.handle = None

    def _acquire(self) -> str:
        vg_name, lv_name = self._query_names()
        snapshot_name = f"{self.config.prefix}{lv_name}"
        handle = SnapshotHandle(
            vg_name=vg_name,
            lv_name=lv_name,
            snapshot_name=snapshot_name,
            snapshot_size=self._query_size(),
            device_path=Path(self.config.device_dir) / vg_name / snapshot_name,
            mount_path=Path(self.config.mount_root) / snapshot_name,
        )
        self.handle = handle

        logger.info(
            "Creating snapshot %s of size %s", handle.lvm_name, handle.snapshot_size
        )
        self._exec_command(
            [
                "lvcreate",
                "--size",
                handle.snapshot_size,
                "--snapshot",
                "--name",
                snapshot_name,
                self.source,
            ],
            __util__.SnapshotCreateFailed,
            f"Could not create snapshot {handle.lvm_name}.",
        )
        handle.created = True

        self._exec_command(
            ["mkdir", "-m", "700", str(handle.mount_path)],
            __util__.MountDirCreateFailed,
            f"Could not create folder {handle.mount_path} to mount snapshot.",
        )
        handle.mount_dir_created = True

        logger.info("Mounting %s at %s", handle.device_path, handle.mount_path)
        self._exec_command(
            [
                "mount",
                *self.config.mount_options,
                str(handle.device_path),
                str(handle.mount_path),
            ],
            __util__.MountFailed,
            f"Could not mount snapshot {handle.lvm_name}.",
        )
        handle.mounted = True
        return str(handle.mount_path)

    def _release(self) -> None:
        handle = self.handle
        if handle is None:
            return

        self._exec_command(
            ["umount", str(handle.mount_path)],
            __util__.UnmountFailed,
            f"Could not unmount snapshot {handle.lvm_name}.",
        )
        handle.mounted = False

        self._exec_command(
            ["rm", "-r", str(handle.mount_path)],
            __util__.MountDirRemoveFailed,
            f"Could not delete mount folder {handle.mount_path}.",
        )
        handle.mount_dir_created = False

        self._exec_command(
            ["lvremove", "-f", handle.lvm_name],
            __util__.SnapshotRemoveFailed,
            f"Could not remove snapshot {handle.lvm_name}.",
        )
        handle.created = False
        self.handle = None

    def _abandon(self) -> None:
        handle = self.handle
        if handle is None:
            return

        if handle.mounted:
            logger.warning("Cleaning up: unmounting %s", handle.mount_path)
            returncode = __util__.exec_subprocess(
                __util__.privileged(["umount", str(handle.mount_path)])
            )
            if returncode != 0:
                # Removing the folder now would delete the snapshot's contents
                logger.warning(
                    "Could not unmount %s, leaving %s in place",
                    handle.mount_path,
                    handle.lvm_name,
                )
                return
            handle.mounted = False

        if handle.mount_dir_created:
            returncode = __util__.exec_subprocess(
                __util__.privileged(["rm", "-r", str(handle.mount_path)])
            )
            if returncode == 0:
                handle.mount_dir_created = False
            else:
                logger.warning("Could not delete mount folder %s", handle.mount_path)

        if handle.created:
            logger.warning("Cleaning up: removing snapshot %s", handle.lvm_name)
            returncode = __util__.exec_subprocess(
                __util__.privileged(["lvremove", "-f", handle.lvm_name])
            )
            if returncode != 0:
                logger.warning("Could not remove snapshot %s", handle.lvm_name)
                return
            handle.created = False

        if not (handle.mounted or handle.mount_dir_created or handle.created):
            self.handle = None

    def leftovers(self) -> list[str]:
        handle = self.handle
        if handle is None:
            return []
        items = []
        if handle.created:
            items.append(f"snapshot {handle.lvm_name}")
        if handle.mounted:
            items.append(f"mount {handle.device_path} on {handle.mount_path}")
        elif handle.mount_dir_created:
            items.append(f"folder {handle.mount_path}")
        return items

    def _query_names(self) -> tuple[str, str]:
        """Ask lvs for the volume group and logical volume names."""
        result = self._query_command(
            ["lvs", "--noheadings", "-o", "vg_name,lv_name", self.source]
        )
        fields = result.stdout.split() if result.returncode == 0 else []
        if len(fields) != 2:
            raise __util__.SnapshotCreateFailed(
                f"Could not determine volume group and name of {self.source}."
            )
        return fields[0], fields[1]

    def _query_size(self) -> str:
        """Ask lvs for the allocated size in bytes, as an lvcreate size."""
        result = self._query_command(
            [
                "lvs",
                "--noheadings",
                "--units",
                "b",
                "--nosuffix",
                "-o",
                "lv_size",
                self.source,
            ]
        )
        size = result.stdout.strip() if result.returncode == 0 else ""
        if not size.isdigit():
            raise __util__.SnapshotCreateFailed(
                f"Could not determine size of {self.source}."
            )
        return f"{size}b"
