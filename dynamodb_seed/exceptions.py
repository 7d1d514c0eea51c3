"""Custom exceptions with helpful error messages."""


class DynamoDBSeedError(Exception):
    """Base exception for dynamodb-seed errors."""

    pass


class ConfigurationError(DynamoDBSeedError):
    """Configuration is incomplete or inconsistent. Never retried."""

    pass


class MissingRegionError(ConfigurationError):
    """Online mode was requested without an AWS region."""

    def __init__(self):
        super().__init__(
            "please specify the region\n\n"
            "Suggestions:\n"
            "1. Pass --region when using --online\n"
            "2. Set region under [start] in dynamodb-seed.toml"
        )


class MissingSeedTableError(ConfigurationError):
    """Seed source has no target table."""

    def __init__(self, sources: tuple[str, ...] = ()):
        self.sources = sources
        listed = ", ".join(sources) if sources else "(no files)"
        super().__init__(
            f'seeding source "table" property not defined (files: {listed})\n\n'
            f"Suggestions:\n"
            f"1. Add table = \"<TableName>\" to every entry of [seed.<category>].sources"
        )


class MissingSeedCategoryError(ConfigurationError):
    """Requested seed category is not configured."""

    def __init__(self, category: str, available: list[str] | None = None):
        self.category = category
        available_str = ", ".join(available) if available else "(none)"
        super().__init__(
            f"Missing category in seed configuration: {category}\n\n"
            f"Suggestions:\n"
            f"1. Check category name spelling\n"
            f"2. Configured categories: {available_str}\n"
            f"3. Add a [seed.{category}] section to dynamodb-seed.toml"
        )


class BatchRetryExceededError(DynamoDBSeedError):
    """Unprocessed items remained after the retry ceiling."""

    def __init__(self, table: str, unprocessed_count: int, attempts: int):
        self.table = table
        self.unprocessed_count = unprocessed_count
        self.attempts = attempts
        super().__init__(
            f"Table '{table}': {unprocessed_count} item(s) still unprocessed "
            f"after {attempts} retries.\n\n"
            f"Suggestions:\n"
            f"1. Check that DynamoDB Local is not overloaded\n"
            f"2. Raise the provisioned write capacity of '{table}'"
        )


class AggregateFailureError(DynamoDBSeedError):
    """One or more concurrent units failed.

    Every failure is kept, in the order the units were submitted, so that
    callers see the whole picture instead of an arbitrary single error.
    """

    def __init__(self, label: str, failures: dict[str, BaseException]):
        self.label = label
        self.failures = failures
        lines = [f"  - {name}: {_first_line(error)}" for name, error in failures.items()]
        super().__init__(
            f"{label} failed for {len(failures)} unit(s):\n" + "\n".join(lines)
        )

    @property
    def errors(self) -> list[BaseException]:
        return list(self.failures.values())


class TableProvisioningError(AggregateFailureError):
    """At least one table could not be created."""

    def __init__(self, failures: dict[str, BaseException]):
        super().__init__("Table provisioning", failures)


class SeedIngestionError(AggregateFailureError):
    """At least one seed source could not be written."""

    def __init__(self, failures: dict[str, BaseException]):
        super().__init__("Seeding", failures)


def _first_line(error: BaseException) -> str:
    message = str(error) or type(error).__name__
    return message.splitlines()[0]
