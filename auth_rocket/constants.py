"""Endpoint paths and fixed names used by the Auth Rocket client"""

from typing import Dict

# Storage key holding the bearer token
TOKEN_KEY = "authToken"

# Remote endpoints, relative to the configured base URL
REGISTER_PATH = "/user/register/"
LOGIN_PATH = "/user/login/"
VERIFY_TOKEN_PATH = "/user/verify-token/"
DELETE_USER_PATH = "/user/delete/{user_id}/"

# Header names
CLIENT_ID_HEADER = "Client-ID"
CLIENT_SECRET_HEADER = "Client-Secret"
AUTHORIZATION_HEADER = "Authorization"

JSON_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
}
