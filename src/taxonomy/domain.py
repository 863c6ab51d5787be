"""Domain initialization and configuration."""

import os

from protean.domain import Domain

from taxonomy.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging(log_dir=os.getenv("LOG_DIR", "logs"), log_file_prefix="taxonomy")

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
taxonomy = Domain(name="taxonomy")
