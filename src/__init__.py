"""sitesync: incremental deploys of static sites to S3 and CloudFront."""

from sitesync.version import __version__

__all__ = ["__version__"]
