#!/usr/bin/env python3
"""
Expiry Sweep Script

Marks every Pending verification request past its expiry as Expired.
Safe to run from cron as often as you like (each update is gated on
status = 'pending').

Usage: python scripts/reconcile_expired.py
"""
import sys
sys.path.insert(0, '.')

from app.core.config import get_settings
from app.core.logger import setup_logger
from app.db.schema import init_db
from app.services.verification_service import get_verification_service


def main():
    settings = get_settings()
    setup_logger(settings.log_level)
    init_db()

    print("=" * 50)
    print("COMPANY VERIFICATION - EXPIRY SWEEP")
    print("=" * 50)

    count = get_verification_service().reconcile_expired()
    print(f"\n    Expired {count} pending request(s)")


if __name__ == "__main__":
    main()
