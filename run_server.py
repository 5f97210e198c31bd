#!/usr/bin/env python3
"""
Code Review Trainer Server

Simple Flask server exposing the disabled-code analysis.
"""

import sys
from pathlib import Path

# Add src directory to Python path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from code_review_trainer.server import create_app

app = create_app()

if __name__ == '__main__':
    print("🚀 Starting Code Review Trainer Server...")
    print("📍 Server will be available at: http://localhost:8000")
    print("📋 API Documentation:")
    print("   - Health Check: GET /api/v1/health")
    print("   - Analyze Files: POST /api/v1/analyze")

    app.run(
        host='0.0.0.0',
        port=8000,
        debug=False
    )
