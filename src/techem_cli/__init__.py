#!/usr/bin/env python3
"""A CLI for the techem_wmbus library."""
