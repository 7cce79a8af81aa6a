#!/usr/bin/env python3

"""Utility helpers for the sequence database pipeline."""
