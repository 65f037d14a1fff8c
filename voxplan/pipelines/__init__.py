"""Processing pipelines grouped by feature."""
