import os
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("SHOPIFY_APP_API_SECRET", "test_secret")
os.environ.setdefault("SHOPIFY_INTERNAL_API_TOKEN", "internal_token")
os.environ.setdefault("SHOPIFY_ADMIN_API_VERSION", "2024-01")
os.environ.setdefault("BACKEND_CORS_ORIGINS", "https://admin.shopify.com")
