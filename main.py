#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Lifetime Demo - Application Entry Point

Runs the heap vs. stack scenarios and reports cleanup as it happens.
"""

import sys

from lifetime.heap_stack_demo import main


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
