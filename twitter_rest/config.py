from dotenv import load_dotenv
import os

load_dotenv()


def _flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).lower() in ('1', 'true', 'yes')


class Config:
    TWITTER_CONSUMER_KEY = os.getenv('TWITTER_CONSUMER_KEY', '')
    TWITTER_CONSUMER_SECRET = os.getenv('TWITTER_CONSUMER_SECRET', '')
    TWITTER_ACCESS_TOKEN = os.getenv('TWITTER_ACCESS_TOKEN', '')
    TWITTER_ACCESS_SECRET = os.getenv('TWITTER_ACCESS_SECRET', '')

    TWITTER_API_PREFIX = os.getenv('TWITTER_API_PREFIX', 'https://api.twitter.com/1.1/')
    TWITTER_REQUEST_TOKEN_URL = os.getenv('TWITTER_REQUEST_TOKEN_URL', 'https://api.twitter.com/oauth/request_token')
    TWITTER_AUTHORIZE_URL = os.getenv('TWITTER_AUTHORIZE_URL', 'https://api.twitter.com/oauth/authenticate')
    TWITTER_ACCESS_TOKEN_URL = os.getenv('TWITTER_ACCESS_TOKEN_URL', 'https://api.twitter.com/oauth/access_token')

    TWITTER_TIMEOUT = float(os.getenv('TWITTER_TIMEOUT', '30'))
    TWITTER_DEBUG = _flag('TWITTER_DEBUG')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
