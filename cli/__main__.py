"""
Entry point for running audit-consensus as a module.

Usage:
    python -m cli consolidate out/security-*.json --context SAAS --audit security
    python -m cli consolidate a.json b.json --resolutions adjudicated.json --format json
    python -m cli audits list
    python -m cli contexts
"""

import asyncio
from .commands import main


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
