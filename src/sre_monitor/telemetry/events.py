"""Semantic event constants for structured logging.

All log events should use these constants rather than magic strings to ensure
consistency and enable reliable querying and analysis.
"""

# Sensor events
SENSOR_POLL = "sensor_poll"
SENSOR_POLL_FAILED = "sensor_poll_failed"
DISK_USAGE_UNAVAILABLE = "disk_usage_unavailable"
LATENCY_PROBE_STARTED = "latency_probe_started"
LATENCY_ATTEMPT_FAILED = "latency_attempt_failed"
LATENCY_PROBE_COMPLETED = "latency_probe_completed"

# Pipeline events
METRICS_COLLECTION_STARTED = "metrics_collection_started"
METRICS_COLLECTION_COMPLETED = "metrics_collection_completed"
METRIC_CLASSIFIED = "metric_classified"
ANALYSIS_COMPLETED = "analysis_completed"
ANALYSIS_FAILED = "analysis_failed"
ANALYSIS_STATUS_MISMATCH = "analysis_status_mismatch"
CYCLE_STARTED = "cycle_started"
CYCLE_COMPLETED = "cycle_completed"

# Notification events
NOTIFICATION_SENT = "notification_sent"
NOTIFICATION_FAILED = "notification_failed"
NOTIFICATION_SKIPPED = "notification_skipped"

# Scheduler events
SCHEDULER_STARTED = "scheduler_started"
SCHEDULER_STOPPED = "scheduler_stopped"
SCHEDULER_ALREADY_RUNNING = "scheduler_already_running"
SCHEDULER_CYCLE_ERROR = "scheduler_cycle_error"
SCHEDULER_STATE_TRANSITION = "scheduler_state_transition"
NEXT_CHECK_SCHEDULED = "next_check_scheduled"

# Configuration events
CONFIG_LOADING = "loading_app_config"
CONFIG_LOADED = "app_config_loaded"
CONFIG_LOAD_FAILED = "app_config_load_failed"
ENV_FILES_LOADED = "env_files_loaded"
ENV_FILES_NOT_FOUND = "no_env_files_found"
