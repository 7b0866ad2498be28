import os

def get_settings_module() -> str:
    # Read the environment from APP_ENV, 'development' by default
    env = os.getenv("APP_ENV", "development").lower()

    # 1. Production environment
    if env in {"prod", "production"}:
        return "config.production"
    
    # 2. Testing environment
    if env in {"test", "testing"}:
        return "config.testing"
    
    # 3. Everything else falls back to development
    return "config.development"
