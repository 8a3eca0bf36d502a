import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Application configuration variables
DATABASE_URL = os.getenv('DATABASE_URL')
SECRET_KEY = os.getenv('SECRET_KEY')

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
HOST = os.getenv('HOST', '127.0.0.1')
PORT = int(os.getenv('PORT', '5000'))

# Monthly metric snapshot schedule (cron fields)
METRICS_CRON_DAY = int(os.getenv('METRICS_CRON_DAY', '1'))
METRICS_CRON_HOUR = int(os.getenv('METRICS_CRON_HOUR', '0'))

OVERSPENT_LIMIT = int(os.getenv('OVERSPENT_LIMIT', '3'))

# Validate required environment variables
if not DATABASE_URL:
    raise ValueError("DATABASE_URL is not set in the environment (.env)")
if not SECRET_KEY:
    raise ValueError("SECRET_KEY is not set in the environment (.env)")
