"""rdiff-batch-backup: rdiff_batch_backup/__init__.py."""


__version__ = "0.3.0"
