# pyright: standard

"""rdiff-batch-backup: rdiff_batch_backup/__main__.py.

Back up ZFS datasets, LVM logical volumes and plain directories with
rdiff-backup, one task after another, aborting on the first failure.
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
