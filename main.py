"""
Review Proxy - Web Server Entry Point
=====================================

Run this to start the API:
    python main.py

Then open http://127.0.0.1:5000 in your browser.
"""

import os

import uvicorn


def main():
    """Start the web server."""
    port = int(os.getenv("PORT", "5000"))

    print("\n" + "=" * 50)
    print("   Review Proxy - Judge.me API")
    print("=" * 50)
    print(f"\n   Starting server at http://127.0.0.1:{port}")
    print("   Press Ctrl+C to stop\n")

    uvicorn.run(
        "review_proxy.web.app:app",
        host="127.0.0.1",
        port=port,
        reload=True,
        log_level="info"
    )


if __name__ == "__main__":
    main()
