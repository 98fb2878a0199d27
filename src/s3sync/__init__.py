"""s3sync - Reconcile a local build directory against an S3 bucket."""

__version__ = "0.1.0"
