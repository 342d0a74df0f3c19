from enum import Enum


class AuthState(Enum):
    GUEST = "GUEST"                  # Anonymous, Local Store is authoritative
    AUTHENTICATED = "AUTHENTICATED"  # Logged in, Remote Store is authoritative
