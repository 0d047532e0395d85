"""Extract OCI image labels from project manifests."""

__version__ = "0.1.0"
