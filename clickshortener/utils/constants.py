# Default shortcode length (62 ** 8 ~ 2.2e14 distinct codes)
DEFAULT_SHORTCODE_LENGTH = 8

# Shortcode allocation strategies
SHORTCODE_STRATEGY_RANDOM = 'random'
SHORTCODE_STRATEGY_SEQUENTIAL = 'sequential'

# Resolution cache sizing
DEFAULT_CACHE_CAPACITY = 10_000
DEFAULT_CACHE_SHARDS = 16

# Retries for generated shortcodes that collide on insert
DEFAULT_MAX_RETRIES = 3

# Public base URL used when none is configured
DEFAULT_BASE_URL = 'http://localhost:3000'

ONE_DAY_SECONDS = 86_400  # 60 * 60 * 24

# Environment variables: application identity
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
LOG_LEVEL_ENV = 'LOG_LEVEL'

# Environment variables: AWS AppConfig
APPCONFIG_APP_ID_ENV = 'APPCONFIG_APP_ID'
APPCONFIG_ENV_ID_ENV = 'APPCONFIG_ENV_ID'
APPCONFIG_PROFILE_ID_ENV = 'APPCONFIG_PROFILE_ID'
