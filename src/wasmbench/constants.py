"""Constants for wasmbench."""

# Subprocess timeouts (seconds)
BENCHMARK_TIMEOUT = 600  # 10 minutes per benchmark iteration

# Report format
BLOCK_TERMINATOR = "=" * 39
FIELD_COUNT = 5

# Output files
CSV_HEADER = ["user_time", "system_time", "cpu_percent", "wallclock_time", "max_rss"]
DEFAULT_CONFIG_NAME = "wasmbench.toml"
DATE_DIR_FORMAT = "%Y_%m_%d"
TIME_DIR_FORMAT = "%H_%M_%S"
