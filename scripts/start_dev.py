#!/usr/bin/env python3
"""
Development startup script.

Starts the storefront in development (test) mode.
"""

import os
import sys
import shutil
import subprocess
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent


def check_dependencies():
    """Check if required dependencies are installed."""
    try:
        import fastapi
        import uvicorn
        import httpx
        import paynow
        print("✓ All core dependencies installed")
        return True
    except ImportError as e:
        print(f"✗ Missing dependency: {e.name}")
        print("\nRun: pip install -e .")
        return False


def check_env():
    """Check if .env file exists and holds PayNow credentials."""
    env_file = PROJECT_ROOT / ".env"
    env_example = PROJECT_ROOT / ".env.example"

    if not env_file.exists():
        if not env_example.exists():
            print("✗ No configuration file found")
            return False
        print("! Configuration file not found, copying from example...")
        shutil.copy(env_example, env_file)
        print("✓ Created .env from example")
        print("  Please edit .env with your PayNow integration details")

    content = env_file.read_text()
    missing = [
        name for name in ("PAYNOW_INTEGRATION_ID", "PAYNOW_INTEGRATION_KEY")
        if f"{name}=" not in content and not os.getenv(name)
    ]
    if missing:
        print(f"! {', '.join(missing)} not set - payments will fail until configured")
    else:
        print("✓ Configuration file found")
    return True


def start_server():
    """Start the storefront in development mode."""
    print("\n🏪 Starting PayNow Store on http://localhost:8000 ...")
    process = subprocess.Popen(
        [
            sys.executable, "-m", "uvicorn",
            "paynow_store.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", "8000",
        ],
        cwd=PROJECT_ROOT,
        env={**os.environ, "APP_ENV": os.getenv("APP_ENV", "development")},
    )

    print("\n" + "=" * 60)
    print("Storefront started!")
    print("=" * 60)
    print("\n📍 Storefront: http://localhost:8000")
    print("📍 API docs:   http://localhost:8000/docs")
    print("\nPress Ctrl+C to stop")
    print("=" * 60)

    try:
        process.wait()
    except KeyboardInterrupt:
        print("\n\nShutting down...")
        process.terminate()
        process.wait()
        print("Stopped.")


def main():
    print("=" * 60)
    print("PayNow Store - Development Server")
    print("=" * 60)

    # Pre-flight checks
    print("\nRunning pre-flight checks...")

    if not check_dependencies():
        sys.exit(1)

    if not check_env():
        sys.exit(1)

    print("\n✓ All checks passed!")

    start_server()


if __name__ == "__main__":
    main()
