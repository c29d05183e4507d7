"""S3 object store, CloudFront invalidation and AWS client construction."""
