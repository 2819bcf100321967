"""
Constants used across the club API.
"""

# Password hashing
BCRYPT_ROUNDS = 12

# Password reset codes
VERIFICATION_CODE_EXPIRATION_MINUTES = 10
VERIFICATION_CODE_MIN = 100000
VERIFICATION_CODE_MAX = 999999

# Player profile bounds
MIN_PLAYER_AGE = 15
MAX_PLAYER_AGE = 50

# A cricket innings ends at 10 wickets
WICKETS_PER_INNINGS = 10

# Client pages the route guard redirects to
SIGN_IN_PATH = "/auth-form"
UNAUTHORIZED_PATH = "/unauthorized"
PLAYER_PAGE_PATH = "/player/{username}"
