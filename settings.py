from pathlib import Path
from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Auth service endpoint
AUTH_API_BASE_URL = config.get("AUTH_API_BASE_URL", "http://localhost:8000/api")

# Client identity sent with every request (Client-ID / Client-Secret headers)
AUTH_CLIENT_ID = config.get("AUTH_CLIENT_ID", "")
AUTH_CLIENT_SECRET = config.get("AUTH_CLIENT_SECRET", "")

# Timeout configuration
# Connection timeout: Time to establish TCP connection
CONNECT_TIMEOUT = config.get("CONNECT_TIMEOUT", 10.0)
# Request timeout: Total timeout for a single auth call
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 30.0)

LOG_LEVEL = config.get("LOG_LEVEL", "info")

# Durable token store
TOKEN_STORE_FILE = config.get("TOKEN_STORE_FILE", str(Path.home() / ".auth-rocket" / "storage.json"))
