#!/usr/bin/env python
"""
Test runner script for the full FarmDesk suite
Usage: python run_tests.py [app ...]
"""
import os
import sys
import django
from django.conf import settings
from django.test.utils import get_runner

APPS = [
    'farmdesk.core',
    'farmdesk.farms',
    'farmdesk.animals',
    'farmdesk.crops',
    'farmdesk.inventory',
    'farmdesk.tasks',
    'farmdesk.financial',
    'farmdesk.planning',
]

if __name__ == "__main__":
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'farmdesk.config.settings')
    django.setup()
    TestRunner = get_runner(settings)
    test_runner = TestRunner()
    labels = [f'farmdesk.{name}' if not name.startswith('farmdesk.') else name for name in sys.argv[1:]] or APPS
    failures = test_runner.run_tests(labels)
    sys.exit(bool(failures))
