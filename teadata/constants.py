"""Infrastructure and technical constants."""

from typing import Final

# Technical configuration constants
DEFAULT_DATABASE_FILE: Final = "TeaVarieties.db"
DEFAULT_HTTP_TIMEOUT: Final = 10.0
TABLE_NAME: Final = "TeaVarieties"

# REST resources, relative to the configured base address
TEAS_COLLECTION_PATH: Final = "api/teas"
