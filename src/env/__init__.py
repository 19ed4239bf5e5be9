from env.env import (
    ConfigError,
    Environment,
    LoggingEnvironment,
    get_env,
    get_logging_env,
    reset_env_caches,
)

from env.paths import (
    CONFIG_DIR,
    LOGS_DIR,
    PROJECT_ROOT,
    command_log_file,
    command_logs_dir,
)

__all__ = [
    "ConfigError",
    "Environment",
    "LoggingEnvironment",
    "get_env",
    "get_logging_env",
    "reset_env_caches",
    "CONFIG_DIR",
    "LOGS_DIR",
    "PROJECT_ROOT",
    "command_log_file",
    "command_logs_dir",
]
