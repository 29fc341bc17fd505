"""Console, error handling and logging shared by the CLI commands."""
