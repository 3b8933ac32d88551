#!/usr/bin/env python
"""
Test runner script
Usage: python Doc/run_tests.py (or python manage.py test)
"""
import os
import sys
from pathlib import Path

import django
from django.conf import settings
from django.test.utils import get_runner

if __name__ == "__main__":
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'backoffice.config.settings')
    django.setup()
    TestRunner = get_runner(settings)
    test_runner = TestRunner()
    failures = test_runner.run_tests([
        'backoffice.core',
        'backoffice.catalog',
    ])
    sys.exit(bool(failures))
