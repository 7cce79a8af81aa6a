#!/usr/bin/env python3

"""
Test suite for the sequence database pipeline.

Unit tests covering:
- Records, molecule types and FASTA reading/writing
- Configuration management and validation
- Header conversion for every source adapter
- Full-gene checks and sequence deduplication
- End-to-end builds with external tools faked out
"""
