"""Configuration constants and runtime profiles for the app."""
import os


def _normalized_database_url() -> str:
    url = os.environ.get('DATABASE_URL', 'sqlite:///league.db')
    if url.startswith('postgres://'):
        return url.replace('postgres://', 'postgresql://', 1)
    return url


class BaseConfig:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key-change-in-production')
    SQLALCHEMY_DATABASE_URI = _normalized_database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True}
    STRUCTURED_LOGGING = os.environ.get('STRUCTURED_LOGGING', '1') == '1'
    SENTRY_DSN = os.environ.get('SENTRY_DSN', '').strip()
    REPORT_CACHE_TTL_SECONDS = int(os.environ.get('REPORT_CACHE_TTL_SECONDS', '60'))


class DevelopmentConfig(BaseConfig):
    ENV_NAME = 'development'


class ProductionConfig(BaseConfig):
    ENV_NAME = 'production'


class TestingConfig(BaseConfig):
    ENV_NAME = 'testing'
    TESTING = True
    STRUCTURED_LOGGING = False
    REPORT_CACHE_TTL_SECONDS = 1


def get_config():
    env = os.environ.get('FLASK_ENV', '').strip().lower()
    if env == 'production' or os.environ.get('PRODUCTION', '').strip() == '1':
        return ProductionConfig
    if env == 'testing':
        return TestingConfig
    return DevelopmentConfig


def validate_runtime(app_config: dict) -> None:
    """Fail fast for production misconfiguration."""
    env_name = app_config.get('ENV_NAME', 'development')
    if env_name != 'production':
        return

    secret = app_config.get('SECRET_KEY') or ''
    weak_values = {'dev-key-change-in-production', 'changeme', 'secret', 'default'}
    if len(secret) < 16 or secret.lower() in weak_values:
        raise RuntimeError('Invalid SECRET_KEY for production. Set a strong random secret.')


# Game types accepted by the scoring calculator
GAME_TYPE_TOURNAMENT = 'Tournament'
GAME_TYPE_CONSOLATION = 'Consolation'
GAME_TYPES = (GAME_TYPE_TOURNAMENT, GAME_TYPE_CONSOLATION)

# Tournament scoring: points = total_players * (positions + 1 - rank) for the top positions
TOURNAMENT_SCORING_POSITIONS = 10

# Consolation games pay a fixed table
CONSOLATION_POINTS = {
    1: 100,
    2: 50,
    3: 25,
}

# Points credited per bounty collected
BOUNTY_POINT_VALUE = 1

# Tournament event types
EVENT_TYPE_SERIES = 'series'
EVENT_TYPE_SEASON_EVENT = 'season_event'

# Qualification types
QUALIFICATION_WINNER = 'Winner'
QUALIFICATION_TOP_THREE = 'TopThree'
QUALIFYING_POSITIONS = 3

# Season event chip counts
BASE_CHIPS = 10000
WINNER_CHIP_BONUS = 15000
TOP_THREE_CHIP_BONUS = 5000
CHIPS_PER_POINT = 100

# Season event seating and prizes
SEASON_EVENT_MAX_PLAYERS = 32
SEASON_EVENT_PRIZES = {
    1: 1200,
    2: 800,
    3: 500,
    4: 300,
    5: 200,
}
