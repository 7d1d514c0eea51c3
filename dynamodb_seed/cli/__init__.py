"""Command-line interface for dynamodb-seed."""
