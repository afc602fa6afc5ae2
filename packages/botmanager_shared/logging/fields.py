"""Canonical logging field and logger names."""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"

# Run correlation fields.
ACTION = "action"
MODE = "mode"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"

# Named sink loggers fed by the messaging backend.
DEBUG_SINK_LOGGER = "telegram.debug"
ERROR_SINK_LOGGER = "telegram.error"
UPDATE_SINK_LOGGER = "telegram.update"

SINK_LOGGERS: dict[str, str] = {
    "debug": DEBUG_SINK_LOGGER,
    "error": ERROR_SINK_LOGGER,
    "update": UPDATE_SINK_LOGGER,
}
