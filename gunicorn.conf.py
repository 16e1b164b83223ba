import os

# Bind to the port provided via the PORT environment variable, defaulting to
# 5000.
bind = f"0.0.0.0:{os.getenv('PORT', '5000')}"

# Cached invoice views and the login rate limiter are per process.
workers = 1
threads = int(os.getenv("GUNICORN_THREADS", "4"))
timeout = 30
