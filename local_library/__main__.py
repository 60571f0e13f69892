from . import create_app
from .config import DevelopmentConfig

if __name__ == "__main__":
    # development server only; use a WSGI server in production
    create_app(DevelopmentConfig).run(host="127.0.0.1", port=5000)
