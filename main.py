#!/usr/bin/env python3
"""
Main entry point for StepView application.
"""

import sys

from step_view.cli import main

if __name__ == "__main__":
    sys.exit(main())
